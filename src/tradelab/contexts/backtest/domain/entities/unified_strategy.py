from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Mapping, Union

from tradelab.contexts.strategy_catalog.domain.entities import BasicStrategyDescriptor

from .strategy_records import (
    ConditionTree,
    CustomStrategyRecord,
    StrategyRecordId,
    UserStrategyRecord,
)


@dataclass(frozen=True, slots=True)
class UserUnifiedStrategy:
    """
    Parametric selectable strategy (`type="user"`).

    Built-in catalog strategies use this variant with `id=None` and an empty `config`,
    user-saved strategies carry their stored `config`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
    """

    type: ClassVar[Literal["user"]] = "user"

    id: StrategyRecordId | None
    name: str
    strategy_type: str
    config: Mapping[str, Any] = field(default_factory=dict)
    description: str | None = None
    is_active: bool | None = None
    is_public: bool | None = None
    original: UserStrategyRecord | BasicStrategyDescriptor | None = field(
        default=None,
        compare=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "config", MappingProxyType(dict(self.config or {})))


@dataclass(frozen=True, slots=True)
class CustomUnifiedStrategy:
    """
    Condition-based selectable strategy (`type="custom"`).

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
    """

    type: ClassVar[Literal["custom"]] = "custom"

    id: StrategyRecordId | None
    name: str
    buy_conditions: ConditionTree | None
    sell_conditions: ConditionTree | None
    description: str | None = None
    is_active: bool | None = None
    is_public: bool | None = None
    original: CustomStrategyRecord | None = field(default=None, compare=False, repr=False)

    @property
    def has_conditions(self) -> bool:
        return self.buy_conditions is not None and self.sell_conditions is not None


UnifiedStrategy = Union[UserUnifiedStrategy, CustomUnifiedStrategy]
