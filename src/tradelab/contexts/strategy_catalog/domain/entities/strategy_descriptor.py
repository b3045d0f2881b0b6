from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from .parameter_def import ParameterDef, ParameterValue

ParameterSchemaEntry = Union[ParameterDef, ParameterValue]
ParameterSchema = Mapping[str, ParameterSchemaEntry]


@dataclass(frozen=True, slots=True)
class BasicStrategyDescriptor:
    """
    BasicStrategyDescriptor — built-in parametric strategy published by the strategy catalog.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/strategy_catalog/domain/definitions/__init__.py
      - src/tradelab/contexts/strategy_catalog/application/ports/parameter_schema_catalog.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
    """

    name: str
    description: str
    parameters: ParameterSchema
    enabled: bool = True
    symbols: tuple[str, ...] = ()
    display_name: str | None = None
    category: str | None = None
    _parameter_names: tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """
        Validate descriptor invariants and freeze the parameter schema.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Structured entries are keyed by their own `ParameterDef.name`; bare scalars
            are legacy shorthand entries that declare no default.
        Raises:
            ValueError: If name is blank or schema keys do not match definitions.
        Side Effects:
            Replaces `parameters` with a read-only `MappingProxyType` copy.
        """
        normalized_name = self.name.strip()
        if not normalized_name:
            raise ValueError("BasicStrategyDescriptor requires a non-empty name")
        object.__setattr__(self, "name", normalized_name)
        if not isinstance(self.parameters, Mapping):
            raise ValueError(
                f"BasicStrategyDescriptor '{normalized_name}' parameters must be a mapping"
            )

        frozen: dict[str, ParameterSchemaEntry] = {}
        for raw_key, entry in self.parameters.items():
            key = str(raw_key).strip()
            if not key:
                raise ValueError(
                    f"BasicStrategyDescriptor '{normalized_name}' has blank parameter name"
                )
            if isinstance(entry, ParameterDef):
                if entry.name != key:
                    raise ValueError(
                        f"BasicStrategyDescriptor '{normalized_name}' parameter key "
                        f"'{key}' does not match definition name '{entry.name}'"
                    )
            elif not isinstance(entry, (bool, int, float, str)):
                raise ValueError(
                    f"BasicStrategyDescriptor '{normalized_name}' parameter '{key}' must be "
                    f"ParameterDef or scalar, got {type(entry).__name__}"
                )
            frozen[key] = entry

        object.__setattr__(self, "parameters", MappingProxyType(frozen))
        object.__setattr__(self, "symbols", tuple(str(item) for item in self.symbols))
        object.__setattr__(self, "_parameter_names", tuple(frozen.keys()))

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def parameter_names(self) -> tuple[str, ...]:
        return self._parameter_names

    def structured_parameters(self) -> tuple[ParameterDef, ...]:
        """Return structured definitions in schema order, skipping legacy scalars."""
        return tuple(
            entry for entry in self.parameters.values() if isinstance(entry, ParameterDef)
        )
