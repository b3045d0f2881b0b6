from .backtest_errors import (
    BacktestDomainError,
    BacktestPreconditionError,
    BacktestServiceError,
    BacktestSubmissionConflictError,
    BacktestTransportError,
    PreconditionCode,
    precondition_message,
)

__all__ = [
    "BacktestDomainError",
    "BacktestPreconditionError",
    "BacktestServiceError",
    "BacktestSubmissionConflictError",
    "BacktestTransportError",
    "PreconditionCode",
    "precondition_message",
]
