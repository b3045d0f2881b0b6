from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from tradelab.contexts.backtest.domain.value_objects import StrategyParameters
from tradelab.contexts.strategy_catalog.domain.services import CUSTOM
from tradelab.shared_kernel.primitives import DateRange, Symbol

from .strategy_records import ConditionTree, StrategyRecordId


@dataclass(frozen=True, slots=True)
class CustomStrategyPayload:
    """
    `customStrategy` request block carrying opaque condition trees of a custom bot.
    """

    id: StrategyRecordId | None
    buy_conditions: ConditionTree
    sell_conditions: ConditionTree

    def __post_init__(self) -> None:
        if self.buy_conditions is None or self.sell_conditions is None:
            raise ValueError("CustomStrategyPayload requires buy and sell conditions")

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "buy_conditions": self.buy_conditions,
            "sell_conditions": self.sell_conditions,
        }


@dataclass(frozen=True, slots=True)
class BacktestRequest:
    """
    BacktestRequest — one validated submission to the backtest execution service.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
      - src/tradelab/contexts/backtest/application/ports/backtest_execution_gateway.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/
        httpx_backtest_execution_gateway.py
    """

    strategy: str
    symbols: tuple[Symbol, ...]
    window: DateRange
    initial_capital: float | int
    shares_per_trade: int
    parameters: StrategyParameters
    custom_strategy: CustomStrategyPayload | None = None

    def __post_init__(self) -> None:
        """
        Validate request envelope invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Precondition checks with user-facing codes already ran in the builder;
            this guards direct construction.
        Raises:
            ValueError: If one of envelope invariants is violated.
        Side Effects:
            Normalizes `symbols` into a tuple of `Symbol`.
        """
        strategy = self.strategy.strip()
        if not strategy:
            raise ValueError("BacktestRequest.strategy must be non-empty")
        object.__setattr__(self, "strategy", strategy)

        symbols = tuple(
            item if isinstance(item, Symbol) else Symbol(item) for item in self.symbols
        )
        if not symbols:
            raise ValueError("BacktestRequest requires at least one symbol")
        object.__setattr__(self, "symbols", symbols)

        if isinstance(self.initial_capital, bool) or self.initial_capital <= 0:
            raise ValueError("BacktestRequest.initial_capital must be > 0")
        if (
            isinstance(self.shares_per_trade, bool)
            or not isinstance(self.shares_per_trade, int)
            or self.shares_per_trade <= 0
        ):
            raise ValueError("BacktestRequest.shares_per_trade must be a positive integer")

        is_custom = strategy == CUSTOM
        if is_custom and self.custom_strategy is None:
            raise ValueError("BacktestRequest for custom strategy requires customStrategy")
        if not is_custom and self.custom_strategy is not None:
            raise ValueError("BacktestRequest.customStrategy is only allowed for custom strategy")

    @property
    def is_custom(self) -> bool:
        return self.custom_strategy is not None

    def to_payload(self) -> dict[str, Any]:
        """
        Render the JSON body of `POST /backtest`.

        Args:
            None.
        Returns:
            dict[str, Any]: Envelope keys, then `customStrategy`, then parameter fields.
        Assumptions:
            Parameter records never emit envelope keys.
        Raises:
            None.
        Side Effects:
            None.
        """
        start_date, end_date = self.window.to_wire()
        payload: dict[str, Any] = {
            "strategy": self.strategy,
            "symbols": [str(symbol) for symbol in self.symbols],
            "startDate": start_date,
            "endDate": end_date,
            "initialCapital": self.initial_capital,
            "sharesPerTrade": self.shares_per_trade,
        }
        if self.custom_strategy is not None:
            payload["customStrategy"] = self.custom_strategy.to_payload()
        payload.update(self.parameters.to_payload())
        return payload

    def parameter_values(self) -> Mapping[str, Any]:
        return self.parameters.to_payload()
