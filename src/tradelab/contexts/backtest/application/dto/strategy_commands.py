from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class UserStrategyDraft:
    """
    UserStrategyDraft — payload for creating a user strategy in the strategy store.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/strategy_store.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/httpx_strategy_store.py
    """

    name: str
    strategy_type: str
    config: Mapping[str, Any] = field(default_factory=dict)
    description: str | None = None
    is_active: bool = True
    is_public: bool = False
    backtest_results: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValueError("UserStrategyDraft.name must be non-empty")
        strategy_type = self.strategy_type.strip()
        if not strategy_type:
            raise ValueError("UserStrategyDraft.strategy_type must be non-empty")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "strategy_type", strategy_type)
        object.__setattr__(self, "config", dict(self.config))
        description = self.description.strip() if self.description is not None else None
        object.__setattr__(self, "description", description or None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "strategy_type": self.strategy_type,
            "config": dict(self.config),
            "is_active": self.is_active,
            "is_public": self.is_public,
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.backtest_results is not None:
            payload["backtest_results"] = dict(self.backtest_results)
        return payload


@dataclass(frozen=True, slots=True)
class UserStrategyPatch:
    """
    Partial update of a stored user strategy; `None` fields are left unchanged.
    """

    name: str | None = None
    description: str | None = None
    config: Mapping[str, Any] | None = None
    is_active: bool | None = None
    is_public: bool | None = None

    def __post_init__(self) -> None:
        if self.name is not None and not self.name.strip():
            raise ValueError("UserStrategyPatch.name must be non-empty when provided")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.name is not None:
            payload["name"] = self.name.strip()
        if self.description is not None:
            payload["description"] = self.description
        if self.config is not None:
            payload["config"] = dict(self.config)
        if self.is_active is not None:
            payload["is_active"] = self.is_active
        if self.is_public is not None:
            payload["is_public"] = self.is_public
        return payload


@dataclass(frozen=True, slots=True)
class SaveStrategyFromBacktestCommand:
    """
    SaveStrategyFromBacktestCommand — `{name, description?, strategy_type, config,
    backtest_results}` sent to the save-from-backtest endpoint.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/httpx_strategy_store.py
    """

    name: str
    strategy_type: str
    config: Mapping[str, Any]
    backtest_results: Mapping[str, Any]
    description: str | None = None

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValueError("SaveStrategyFromBacktestCommand.name must be non-empty")
        object.__setattr__(self, "name", name)
        description = self.description.strip() if self.description is not None else None
        object.__setattr__(self, "description", description or None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "strategy_type": self.strategy_type,
            "config": dict(self.config),
            "backtest_results": dict(self.backtest_results),
        }
        if self.description is not None:
            payload["description"] = self.description
        return payload
