from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Union

StrategyRecordId = Union[int, str]
ConditionTree = Mapping[str, Any]


def _freeze_mapping(value: Mapping[str, Any] | None, *, field_path: str) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise ValueError(f"{field_path} must be a mapping, got {type(value).__name__}")
    return MappingProxyType(dict(value))


def _normalize_name(raw_name: str, *, owner: str) -> str:
    name = str(raw_name).strip()
    if not name:
        raise ValueError(f"{owner}.name must be non-empty")
    return name


@dataclass(frozen=True, slots=True)
class UserStrategyRecord:
    """
    UserStrategyRecord — user-saved (or community/public) parametric strategy snapshot.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/strategy_store.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/wire_models.py
    """

    id: StrategyRecordId
    name: str
    strategy_type: str
    config: Mapping[str, Any]
    description: str | None = None
    is_active: bool = True
    is_public: bool = False
    user_id: StrategyRecordId | None = None
    backtest_results: Mapping[str, Any] | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __post_init__(self) -> None:
        """
        Validate record identity and freeze nested mappings.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `strategy_type` may use any stored spelling; it is normalized at request time.
            `config` may be empty for records that rely on schema defaults.
        Raises:
            ValueError: If name is blank or mapping fields have invalid shape.
        Side Effects:
            Replaces `config` and `backtest_results` with read-only mapping copies.
        """
        object.__setattr__(self, "name", _normalize_name(self.name, owner="UserStrategyRecord"))
        object.__setattr__(self, "strategy_type", str(self.strategy_type or "").strip())
        object.__setattr__(
            self,
            "config",
            _freeze_mapping(self.config, field_path="UserStrategyRecord.config"),
        )
        if self.backtest_results is not None:
            object.__setattr__(
                self,
                "backtest_results",
                _freeze_mapping(
                    self.backtest_results,
                    field_path="UserStrategyRecord.backtest_results",
                ),
            )


@dataclass(frozen=True, slots=True)
class CustomStrategyRecord:
    """
    CustomStrategyRecord — condition-based strategy with opaque buy/sell expression trees.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/strategy_store.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
    """

    id: StrategyRecordId
    name: str
    buy_conditions: ConditionTree | None
    sell_conditions: ConditionTree | None
    description: str | None = None
    is_active: bool = True
    is_public: bool = False
    user_id: StrategyRecordId | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __post_init__(self) -> None:
        # Condition trees are never interpreted here; missing trees are reported on submit.
        object.__setattr__(
            self,
            "name",
            _normalize_name(self.name, owner="CustomStrategyRecord"),
        )
