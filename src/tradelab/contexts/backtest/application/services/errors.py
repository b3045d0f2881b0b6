from __future__ import annotations

from typing import Any

from tradelab.contexts.backtest.domain.entities import DEFAULT_FAILURE_MESSAGE
from tradelab.contexts.backtest.domain.errors import (
    BacktestPreconditionError,
    BacktestServiceError,
    BacktestSubmissionConflictError,
    BacktestTransportError,
)
from tradelab.platform.errors import TradelabError


def validation_error(*, error: BacktestPreconditionError) -> TradelabError:
    """
    Build canonical `validation_error` from a local precondition failure.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/domain/errors/backtest_errors.py
      - src/tradelab/platform/errors/tradelab_error.py

    Args:
        error: Precondition failure raised by the request builder or coordinator.
    Returns:
        TradelabError: Error with `details.reason` set to the precondition code.
    Assumptions:
        Precondition messages are already user-facing; precondition details never
        replace the `reason` code.
    Raises:
        None.
    Side Effects:
        None.
    """
    details: dict[str, Any] = dict(error.details)
    details["reason"] = error.code
    return TradelabError(code="validation_error", message=error.message, details=details)


def transport_error(*, error: BacktestTransportError) -> TradelabError:
    details: dict[str, Any] = {"cause": str(error)}
    if error.status_code is not None:
        details["status_code"] = error.status_code
    return TradelabError(code="transport_error", message=DEFAULT_FAILURE_MESSAGE, details=details)


def map_backtest_exception(*, error: Exception) -> TradelabError:
    """
    Map known backtest exceptions to canonical TradelabError contract.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - apps/cli/commands/run_backtest.py

    Args:
        error: Raised exception.
    Returns:
        TradelabError: Canonical error; unknown exceptions map to `unexpected_error`.
    Assumptions:
        Transport failures hide technical causes from the message and keep them in details.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(error, TradelabError):
        return error
    if isinstance(error, BacktestPreconditionError):
        return validation_error(error=error)
    if isinstance(error, BacktestTransportError):
        return transport_error(error=error)
    if isinstance(error, BacktestServiceError):
        details: dict[str, Any] = {}
        if error.error_code is not None:
            details["service_code"] = error.error_code
        return TradelabError(
            code="backtest_failed",
            message=error.service_message,
            details=details,
        )
    if isinstance(error, BacktestSubmissionConflictError):
        return TradelabError(code="conflict", message=str(error))
    return TradelabError(
        code="unexpected_error",
        message=DEFAULT_FAILURE_MESSAGE,
        details={"exception": type(error).__name__},
    )
