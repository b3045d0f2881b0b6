from .backtest_request_builder import BacktestRequestBuilder
from .errors import map_backtest_exception, transport_error, validation_error
from .session_state_coordinator import (
    SessionStateCoordinator,
    SubmissionStatus,
    SubmissionTicket,
)
from .unified_strategy_adapter import UnifiedStrategyAdapter

__all__ = [
    "BacktestRequestBuilder",
    "SessionStateCoordinator",
    "SubmissionStatus",
    "SubmissionTicket",
    "UnifiedStrategyAdapter",
    "map_backtest_exception",
    "transport_error",
    "validation_error",
]
