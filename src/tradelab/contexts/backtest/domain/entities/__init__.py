from .backtest_request import BacktestRequest, CustomStrategyPayload
from .backtest_response import (
    DEFAULT_FAILURE_MESSAGE,
    BacktestResponse,
    BacktestSummary,
    PerSymbolResult,
)
from .strategy_records import (
    ConditionTree,
    CustomStrategyRecord,
    StrategyRecordId,
    UserStrategyRecord,
)
from .unified_strategy import CustomUnifiedStrategy, UnifiedStrategy, UserUnifiedStrategy

__all__ = [
    "DEFAULT_FAILURE_MESSAGE",
    "BacktestRequest",
    "BacktestResponse",
    "BacktestSummary",
    "ConditionTree",
    "CustomStrategyPayload",
    "CustomStrategyRecord",
    "CustomUnifiedStrategy",
    "PerSymbolResult",
    "StrategyRecordId",
    "UnifiedStrategy",
    "UserStrategyRecord",
    "UserUnifiedStrategy",
]
