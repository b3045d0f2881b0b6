from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_FAILURE_MESSAGE = "Failed to run backtest"


@dataclass(frozen=True, slots=True)
class PerSymbolResult:
    """
    Display metrics of one simulated symbol; missing metrics are normalized to zero.
    """

    symbol: str
    final_portfolio_value: float = 0.0
    total_return: float = 0.0
    win_rate: float = 0.0
    max_drawdown: float = 0.0
    total_trades: int = 0
    trades: tuple[Mapping[str, Any], ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class BacktestSummary:
    """
    BacktestSummary — normalized display model of a successful backtest run.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/adapters/outbound/http/wire_models.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - apps/cli/commands/run_backtest.py
    """

    strategy: str
    symbols: tuple[str, ...]
    results: tuple[PerSymbolResult, ...] = ()
    total_return: float = 0.0
    final_portfolio_value: float = 0.0
    win_rate: float = 0.0
    total_trades: int = 0
    max_drawdown: float = 0.0
    start_date: str | None = None
    end_date: str | None = None
    raw_payload: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbols", tuple(self.symbols))
        object.__setattr__(self, "results", tuple(self.results))
        object.__setattr__(self, "raw_payload", MappingProxyType(dict(self.raw_payload)))

    @property
    def is_profitable(self) -> bool:
        return self.total_return > 0

    def failed_symbols(self) -> tuple[str, ...]:
        return tuple(result.symbol for result in self.results if result.failed)


@dataclass(frozen=True, slots=True)
class BacktestResponse:
    """
    BacktestResponse — `{success, data?, error?}` outcome returned by the execution service.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/backtest_execution_gateway.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    success: bool
    data: BacktestSummary | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """
        Validate outcome consistency.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Failed outcomes without a service message use the generic failure message.
        Raises:
            ValueError: If a successful outcome has no data.
        Side Effects:
            Normalizes blank failure message.
        """
        if self.success:
            if self.data is None:
                raise ValueError("successful BacktestResponse requires data")
            return
        message = (self.error or "").strip()
        object.__setattr__(self, "error", message or DEFAULT_FAILURE_MESSAGE)
