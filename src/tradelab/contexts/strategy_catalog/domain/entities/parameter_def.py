from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .parameter_kind import ParameterKind

ParameterValue = Union[bool, int, float, str]


@dataclass(frozen=True, slots=True)
class ParameterDef:
    """
    Domain declaration of a single tunable strategy parameter.

    Docs: docs/architecture/backtest/backtest-request-construction-v1.md
    Related: .parameter_kind, .strategy_descriptor, ..definitions
    """

    name: str
    kind: ParameterKind
    default: ParameterValue | None = None
    description: str = ""
    min_value: float | int | None = None
    max_value: float | int | None = None
    step: float | int | None = None
    options: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """
        Validate parameter definition invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Numeric bounds apply only to `number` kind, options only to `select` kind.
        Raises:
            ValueError: If name is invalid or kind-specific invariants are violated.
        Side Effects:
            Normalizes `name`, `description`, and option values by stripping spaces.
        """
        normalized_name = self.name.strip()
        object.__setattr__(self, "name", normalized_name)
        object.__setattr__(self, "description", self.description.strip())
        if not normalized_name:
            raise ValueError("ParameterDef requires a non-empty name")
        if not isinstance(self.kind, ParameterKind):
            object.__setattr__(self, "kind", ParameterKind(self.kind))

        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError(f"ParameterDef '{normalized_name}' requires min <= max")

        if self.kind is ParameterKind.NUMBER:
            self._validate_number_param()
            return
        if self.kind is ParameterKind.SELECT:
            self._validate_select_param()
            return
        self._validate_plain_param()

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def _validate_number_param(self) -> None:
        """
        Validate numeric parameter invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Bool values are rejected even though bool is an int subclass.
        Raises:
            ValueError: If numeric constraints are violated.
        Side Effects:
            None.
        """
        if self.options is not None:
            raise ValueError(f"Numeric ParameterDef '{self.name}' must not define options")
        if self.step is not None and self.step <= 0:
            raise ValueError(f"Numeric ParameterDef '{self.name}' requires step > 0")

        if self.default is None:
            return
        if isinstance(self.default, bool) or not isinstance(self.default, (int, float)):
            raise ValueError(f"Numeric ParameterDef '{self.name}' default must be a number")
        if self.min_value is not None and self.default < self.min_value:
            raise ValueError(f"ParameterDef '{self.name}' default must be >= min")
        if self.max_value is not None and self.default > self.max_value:
            raise ValueError(f"ParameterDef '{self.name}' default must be <= max")

    def _validate_select_param(self) -> None:
        """
        Validate select parameter invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Select kind disallows numeric bounds and requires non-empty unique options.
        Raises:
            ValueError: If select constraints are violated.
        Side Effects:
            Normalizes option values by stripping spaces.
        """
        self._reject_numeric_bounds()
        if self.options is None or len(self.options) == 0:
            raise ValueError(f"Select ParameterDef '{self.name}' requires non-empty options")

        normalized: list[str] = []
        for raw in self.options:
            value = str(raw).strip()
            if not value:
                raise ValueError(f"Select ParameterDef '{self.name}' options must be non-empty")
            normalized.append(value)
        if len(set(normalized)) != len(normalized):
            raise ValueError(f"Select ParameterDef '{self.name}' options must be unique")

        if self.default is not None and self.default not in normalized:
            raise ValueError(f"Select ParameterDef '{self.name}' default must belong to options")
        object.__setattr__(self, "options", tuple(normalized))

    def _validate_plain_param(self) -> None:
        self._reject_numeric_bounds()
        if self.options is not None:
            raise ValueError(f"ParameterDef '{self.name}' of kind {self.kind.value} has options")
        if self.default is None:
            return
        if self.kind is ParameterKind.BOOLEAN and not isinstance(self.default, bool):
            raise ValueError(f"Boolean ParameterDef '{self.name}' default must be bool")
        if self.kind is ParameterKind.STRING and not isinstance(self.default, str):
            raise ValueError(f"String ParameterDef '{self.name}' default must be str")

    def _reject_numeric_bounds(self) -> None:
        if self.min_value is not None or self.max_value is not None or self.step is not None:
            raise ValueError(
                f"ParameterDef '{self.name}' of kind {self.kind.value} "
                "does not allow min, max, or step"
            )
