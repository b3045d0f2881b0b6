"""
Pydantic wire models and converters for strategy catalog payloads.

The same payload shape is served by `GET /backtest/strategies` and stored in
`configs/<env>/strategies.yaml`.

Docs:
  - docs/architecture/backtest/backtest-request-construction-v1.md
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tradelab.contexts.strategy_catalog.domain.entities import (
    BasicStrategyDescriptor,
    ParameterDef,
    ParameterKind,
    ParameterSchemaEntry,
)

CatalogScalar = Union[bool, int, float, str]


class StrategyParameterPayload(BaseModel):
    """
    Structured parameter definition DTO (`{"type": "number", "default": 20, ...}`).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: ParameterKind = Field(alias="type")
    description: str = ""
    default: CatalogScalar | None = None
    min: float | int | None = None
    max: float | int | None = None
    step: float | int | None = None
    options: list[str] | None = None

    def to_domain(self, *, name: str) -> ParameterDef:
        """
        Convert wire parameter definition into domain `ParameterDef`.

        Args:
            name: Parameter key from the owning schema mapping.
        Returns:
            ParameterDef: Validated domain definition.
        Assumptions:
            Wire `min`/`max` map to `min_value`/`max_value`.
        Raises:
            ValueError: If domain invariants are violated.
        Side Effects:
            None.
        """
        return ParameterDef(
            name=name,
            kind=self.kind,
            default=self.default,
            description=self.description,
            min_value=self.min,
            max_value=self.max,
            step=self.step,
            options=tuple(self.options) if self.options is not None else None,
        )


class StrategyDescriptorPayload(BaseModel):
    """
    Built-in strategy descriptor DTO as published by the catalog collaborator.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    description: str = ""
    category: str | None = None
    enabled: bool = True
    symbols: list[str] = Field(default_factory=list)
    parameters: dict[str, Union[StrategyParameterPayload, CatalogScalar]] = Field(
        default_factory=dict
    )

    def to_domain(self) -> BasicStrategyDescriptor:
        schema: dict[str, ParameterSchemaEntry] = {}
        for key, entry in self.parameters.items():
            if isinstance(entry, StrategyParameterPayload):
                schema[key] = entry.to_domain(name=key)
            else:
                schema[key] = entry
        return BasicStrategyDescriptor(
            name=self.name,
            description=self.description,
            parameters=schema,
            enabled=self.enabled,
            symbols=tuple(self.symbols),
            display_name=self.display_name,
            category=self.category,
        )


def descriptors_from_payload(items: Sequence[Any]) -> tuple[BasicStrategyDescriptor, ...]:
    """
    Parse raw descriptor payload items into domain descriptors.

    Args:
        items: Sequence of JSON/YAML-decoded descriptor mappings.
    Returns:
        tuple[BasicStrategyDescriptor, ...]: Descriptors in payload order.
    Assumptions:
        Descriptor names are unique after normalization.
    Raises:
        ValueError: If an item has invalid shape, violates invariants, or repeats a name.
    Side Effects:
        None.
    """
    descriptors: list[BasicStrategyDescriptor] = []
    seen: set[str] = set()
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValueError(
                f"strategies[{index}] must be a mapping, got {type(item).__name__}"
            )
        try:
            descriptor = StrategyDescriptorPayload.model_validate(item).to_domain()
        except ValidationError as error:
            raise ValueError(f"strategies[{index}] is invalid: {error}") from error
        if descriptor.name in seen:
            raise ValueError(f"duplicate strategy name in catalog: {descriptor.name!r}")
        seen.add(descriptor.name)
        descriptors.append(descriptor)
    return tuple(descriptors)


def descriptor_to_payload(descriptor: BasicStrategyDescriptor) -> dict[str, Any]:
    """Render a descriptor back into the catalog wire shape."""
    parameters: dict[str, Any] = {}
    for key, entry in descriptor.parameters.items():
        if not isinstance(entry, ParameterDef):
            parameters[key] = entry
            continue
        item: dict[str, Any] = {
            "type": entry.kind.value,
            "description": entry.description,
            "default": entry.default,
        }
        if entry.min_value is not None:
            item["min"] = entry.min_value
        if entry.max_value is not None:
            item["max"] = entry.max_value
        if entry.step is not None:
            item["step"] = entry.step
        if entry.options is not None:
            item["options"] = list(entry.options)
        parameters[key] = item
    return {
        "name": descriptor.name,
        "displayName": descriptor.label,
        "description": descriptor.description,
        "category": descriptor.category,
        "enabled": descriptor.enabled,
        "symbols": list(descriptor.symbols),
        "parameters": parameters,
    }
