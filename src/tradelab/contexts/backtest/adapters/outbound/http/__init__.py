from .httpx_backtest_execution_gateway import HttpxBacktestExecutionGateway
from .httpx_strategy_store import HttpxStrategyStore
from .wire_models import (
    BacktestResponsePayload,
    BacktestSummaryPayload,
    CustomStrategyRecordPayload,
    PerSymbolResultPayload,
    UserStrategyPayload,
)

__all__ = [
    "BacktestResponsePayload",
    "BacktestSummaryPayload",
    "CustomStrategyRecordPayload",
    "HttpxBacktestExecutionGateway",
    "HttpxStrategyStore",
    "PerSymbolResultPayload",
    "UserStrategyPayload",
]
