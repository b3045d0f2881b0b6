from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from tradelab.contexts.backtest.domain.entities import UnifiedStrategy


@dataclass(frozen=True, slots=True)
class BacktestSelection:
    """
    BacktestSelection — symbols, selected strategy and active parameters of one session.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    symbols: tuple[str, ...]
    strategy: UnifiedStrategy | None
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbols", tuple(self.symbols))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))
