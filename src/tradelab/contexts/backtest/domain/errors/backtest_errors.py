from __future__ import annotations

from types import MappingProxyType
from typing import Any, Literal, Mapping

PreconditionCode = Literal[
    "NoSymbolsSelected",
    "NoStrategySelected",
    "CustomStrategyMissingConditions",
    "InvalidStrategyVariant",
    "InvalidStrategyParameter",
    "InvalidDateRange",
    "InvalidInitialCapital",
    "InvalidSharesPerTrade",
    "InvalidStrategyName",
    "NoBacktestResultToSave",
]

_PRECONDITION_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "NoSymbolsSelected": "Please select at least one stock to test",
        "NoStrategySelected": "Please select a bot to test",
        "CustomStrategyMissingConditions": "Custom strategy is missing buy or sell conditions",
        "InvalidStrategyVariant": "Invalid bot type for backtesting",
        "InvalidStrategyParameter": "Invalid strategy parameter",
        "InvalidDateRange": "Start date must be before end date",
        "InvalidInitialCapital": "Initial capital must be greater than zero",
        "InvalidSharesPerTrade": "Shares per trade must be a positive whole number",
        "InvalidStrategyName": "Strategy name is required",
        "NoBacktestResultToSave": "Run a successful backtest before saving the strategy",
    }
)


class BacktestDomainError(ValueError):
    """
    Base deterministic domain error for backtest request construction.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/errors.py
      - src/tradelab/platform/errors/tradelab_error.py
    """


class BacktestPreconditionError(BacktestDomainError):
    """
    Raised when a backtest cannot be submitted because local preconditions fail.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - src/tradelab/contexts/backtest/application/services/errors.py
    """

    def __init__(
        self,
        code: PreconditionCode,
        *,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Build precondition error with stable code and user-facing message.

        Args:
            code: Stable precondition code.
            message: Optional message override; defaults to the code's user message.
            details: Optional structured details (for example parameter `path`).
        Returns:
            None.
        Assumptions:
            Preconditions are detected before any network call and are never retried.
        Raises:
            None.
        Side Effects:
            Stores immutable details copy.
        """
        resolved_message = message or _PRECONDITION_MESSAGES.get(code, "Validation failed")
        super().__init__(resolved_message)
        self._code = code
        self._message = resolved_message
        self._details = MappingProxyType(dict(details or {}))

    @property
    def code(self) -> PreconditionCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> Mapping[str, Any]:
        return self._details


class BacktestTransportError(BacktestDomainError):
    """
    Raised when the execution service is unreachable or answers with an unusable response.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/adapters/outbound/http/httpx_backtest_execution_gateway.py
      - src/tradelab/contexts/backtest/application/services/errors.py
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BacktestServiceError(BacktestDomainError):
    """
    Raised when a collaborator answers `{"success": false, "error": ...}`.

    The service message is shown to the user verbatim.
    """

    def __init__(self, message: str, *, error_code: str | None = None) -> None:
        resolved_message = (message or "").strip() or "Failed to run backtest"
        super().__init__(resolved_message)
        self.service_message = resolved_message
        self.error_code = error_code


class BacktestSubmissionConflictError(BacktestDomainError):
    """
    Raised when a submission is attempted while another one is still in flight.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    def __init__(self) -> None:
        super().__init__("A backtest is already running for this session")


def precondition_message(code: str) -> str:
    return _PRECONDITION_MESSAGES.get(code, "Validation failed")
