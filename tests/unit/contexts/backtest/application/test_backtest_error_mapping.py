from __future__ import annotations

from tradelab.contexts.backtest.application.services import map_backtest_exception
from tradelab.contexts.backtest.domain.errors import (
    BacktestPreconditionError,
    BacktestServiceError,
    BacktestSubmissionConflictError,
    BacktestTransportError,
)
from tradelab.platform.errors import TradelabError


def test_precondition_error_maps_to_validation_error_with_reason() -> None:
    """
    Verify precondition code and details land in canonical error details.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Precondition message is shown verbatim.
    Raises:
        AssertionError: If mapped payload differs.
    Side Effects:
        None.
    """
    error = BacktestPreconditionError(
        "InvalidStrategyParameter",
        message="Parameter 'window' must be an integer",
        details={"path": "window", "expected": "int", "actual": "str"},
    )

    mapped = map_backtest_exception(error=error)

    assert mapped.to_payload() == {
        "error": {
            "code": "validation_error",
            "message": "Parameter 'window' must be an integer",
            "details": {
                "actual": "str",
                "expected": "int",
                "path": "window",
                "reason": "InvalidStrategyParameter",
            },
        }
    }


def test_precondition_details_cannot_replace_reason_code() -> None:
    error = BacktestPreconditionError(
        "InvalidStrategyVariant",
        details={"reason": "free text", "cause": "user strategy cannot be custom"},
    )

    mapped = map_backtest_exception(error=error)

    assert mapped.reason == "InvalidStrategyVariant"
    assert mapped.details is not None
    assert mapped.details["cause"] == "user strategy cannot be custom"


def test_transport_error_hides_cause_from_message() -> None:
    mapped = map_backtest_exception(
        error=BacktestTransportError("Unexpected backtest status: 502", status_code=502)
    )

    assert mapped.code == "transport_error"
    assert mapped.message == "Failed to run backtest"
    assert mapped.details == {"cause": "Unexpected backtest status: 502", "status_code": 502}


def test_service_error_keeps_service_message() -> None:
    plain = map_backtest_exception(error=BacktestServiceError("Invalid strategy"))
    coded = map_backtest_exception(
        error=BacktestServiceError("Limit reached", error_code="BOT_LIMIT_EXCEEDED")
    )

    assert (plain.code, plain.message, plain.details) == ("backtest_failed", "Invalid strategy", {})
    assert coded.details == {"service_code": "BOT_LIMIT_EXCEEDED"}


def test_conflict_and_unknown_errors_are_mapped() -> None:
    conflict = map_backtest_exception(error=BacktestSubmissionConflictError())
    unexpected = map_backtest_exception(error=KeyError("boom"))

    assert conflict.code == "conflict"
    assert unexpected.code == "unexpected_error"
    assert unexpected.message == "Failed to run backtest"
    assert unexpected.details == {"exception": "KeyError"}


def test_tradelab_error_is_returned_unchanged() -> None:
    error = TradelabError(code="validation_error", message="Please select a bot to test")

    assert map_backtest_exception(error=error) is error
