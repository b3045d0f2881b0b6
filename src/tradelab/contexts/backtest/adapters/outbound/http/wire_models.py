"""
Pydantic wire models for execution service and strategy store payloads.

Wire names are camelCase for execution payloads and snake_case for stored strategies.

Docs:
  - docs/architecture/backtest/backtest-request-construction-v1.md
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from tradelab.contexts.backtest.domain.entities import (
    BacktestResponse,
    BacktestSummary,
    CustomStrategyRecord,
    PerSymbolResult,
    UserStrategyRecord,
)

WireRecordId = Union[int, str]


class PerSymbolResultPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    symbol: str
    final_portfolio_value: float = Field(default=0.0, alias="finalPortfolioValue")
    total_return: float = Field(default=0.0, alias="totalReturn")
    win_rate: float = Field(default=0.0, alias="winRate")
    max_drawdown: float = Field(default=0.0, alias="maxDrawdown")
    total_trades: int = Field(default=0, alias="totalTrades")
    trades: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None

    def to_domain(self) -> PerSymbolResult:
        return PerSymbolResult(
            symbol=self.symbol,
            final_portfolio_value=self.final_portfolio_value,
            total_return=self.total_return,
            win_rate=self.win_rate,
            max_drawdown=self.max_drawdown,
            total_trades=self.total_trades,
            trades=tuple(self.trades),
            error=self.error,
        )


class BacktestSummaryPayload(BaseModel):
    """
    `data` block of a successful execution response.

    Aggregate metrics are optional on the wire and default to zero.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    strategy: str = ""
    symbols: list[str] = Field(default_factory=list)
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    results: list[PerSymbolResultPayload] = Field(default_factory=list)
    total_return: float = Field(default=0.0, alias="totalReturn")
    final_portfolio_value: float = Field(default=0.0, alias="finalPortfolioValue")
    win_rate: float = Field(default=0.0, alias="winRate")
    total_trades: int = Field(default=0, alias="totalTrades")
    max_drawdown: float = Field(default=0.0, alias="maxDrawdown")

    def to_domain(self, *, raw_payload: dict[str, Any]) -> BacktestSummary:
        return BacktestSummary(
            strategy=self.strategy,
            symbols=tuple(self.symbols),
            results=tuple(result.to_domain() for result in self.results),
            total_return=self.total_return,
            final_portfolio_value=self.final_portfolio_value,
            win_rate=self.win_rate,
            total_trades=self.total_trades,
            max_drawdown=self.max_drawdown,
            start_date=self.start_date,
            end_date=self.end_date,
            raw_payload=raw_payload,
        )


class BacktestResponsePayload(BaseModel):
    """
    Execution service envelope `{success, data?, error?}`.
    """

    model_config = ConfigDict(extra="ignore")

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    def to_domain(self) -> BacktestResponse:
        """
        Convert the envelope into a domain `BacktestResponse`.

        Args:
            None.
        Returns:
            BacktestResponse: Success with parsed summary, or failure with service message.
        Assumptions:
            The raw `data` mapping is kept on the summary for saving results verbatim.
        Raises:
            pydantic.ValidationError: If `data` does not match the summary shape.
            ValueError: If `success` is true without `data`.
        Side Effects:
            None.
        """
        if not self.success:
            return BacktestResponse(success=False, error=self.error)
        if self.data is None:
            raise ValueError("successful backtest response has no data")
        summary = BacktestSummaryPayload.model_validate(self.data)
        return BacktestResponse(success=True, data=summary.to_domain(raw_payload=self.data))


class UserStrategyPayload(BaseModel):
    """
    Stored user strategy row (`strategies` table shape).
    """

    model_config = ConfigDict(extra="ignore")

    id: WireRecordId
    name: str
    strategy_type: str
    config: dict[str, Any] = Field(default_factory=dict)
    description: str | None = None
    is_active: bool = True
    is_public: bool = False
    user_id: WireRecordId | None = None
    backtest_results: dict[str, Any] | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_domain(self) -> UserStrategyRecord:
        return UserStrategyRecord(
            id=self.id,
            name=self.name,
            strategy_type=self.strategy_type,
            config=self.config,
            description=self.description,
            is_active=self.is_active,
            is_public=self.is_public,
            user_id=self.user_id,
            backtest_results=self.backtest_results,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class CustomStrategyRecordPayload(BaseModel):
    """
    Stored condition-based strategy row (`custom_strategies` table shape).
    """

    model_config = ConfigDict(extra="ignore")

    id: WireRecordId
    name: str
    buy_conditions: dict[str, Any] | None = None
    sell_conditions: dict[str, Any] | None = None
    description: str | None = None
    is_active: bool = True
    is_public: bool = False
    user_id: WireRecordId | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_domain(self) -> CustomStrategyRecord:
        return CustomStrategyRecord(
            id=self.id,
            name=self.name,
            buy_conditions=self.buy_conditions,
            sell_conditions=self.sell_conditions,
            description=self.description,
            is_active=self.is_active,
            is_public=self.is_public,
            user_id=self.user_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class StoreErrorPayload(BaseModel):
    """
    Error body of the strategy store (`{message, error?}`) or execution service
    (`{success: false, error}`).
    """

    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    error: str | None = None
