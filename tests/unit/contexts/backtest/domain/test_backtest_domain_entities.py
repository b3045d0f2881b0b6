from __future__ import annotations

from datetime import date

import pytest

from tradelab.contexts.backtest.domain.entities import (
    DEFAULT_FAILURE_MESSAGE,
    BacktestRequest,
    BacktestResponse,
    BacktestSummary,
    CustomStrategyPayload,
    PerSymbolResult,
    UserStrategyRecord,
    UserUnifiedStrategy,
)
from tradelab.contexts.backtest.domain.errors import (
    BacktestPreconditionError,
    BacktestServiceError,
    precondition_message,
)
from tradelab.contexts.backtest.domain.value_objects import (
    BacktestFormFields,
    CustomConditionsParameters,
    MeanReversionParameters,
)
from tradelab.shared_kernel.primitives import DateRange


def _window() -> DateRange:
    return DateRange(start=date(2024, 1, 1), end=date(2024, 6, 30))


def test_backtest_request_payload_orders_envelope_before_parameters() -> None:
    """
    Verify request body starts with envelope keys and ends with parameter fields.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Body key order is part of the wire contract.
    Raises:
        AssertionError: If body keys or values differ.
    Side Effects:
        None.
    """
    request = BacktestRequest(
        strategy="meanReversion",
        symbols=("aapl", "msft"),  # type: ignore[arg-type]
        window=_window(),
        initial_capital=10000,
        shares_per_trade=100,
        parameters=MeanReversionParameters(window=20, threshold=0.05),
    )

    payload = request.to_payload()

    assert list(payload) == [
        "strategy",
        "symbols",
        "startDate",
        "endDate",
        "initialCapital",
        "sharesPerTrade",
        "window",
        "threshold",
    ]
    assert payload["symbols"] == ["AAPL", "MSFT"]
    assert payload["startDate"] == "2024-01-01"
    assert request.is_custom is False


def test_custom_request_carries_condition_block_after_envelope() -> None:
    request = BacktestRequest(
        strategy="custom",
        symbols=("AAPL",),  # type: ignore[arg-type]
        window=_window(),
        initial_capital=5000.5,
        shares_per_trade=10,
        parameters=CustomConditionsParameters(),
        custom_strategy=CustomStrategyPayload(
            id=7,
            buy_conditions={"op": "AND", "rules": []},
            sell_conditions={"op": "OR", "rules": []},
        ),
    )

    payload = request.to_payload()

    assert list(payload)[-1] == "customStrategy"
    assert payload["customStrategy"] == {
        "id": 7,
        "buy_conditions": {"op": "AND", "rules": []},
        "sell_conditions": {"op": "OR", "rules": []},
    }
    assert request.is_custom is True


@pytest.mark.parametrize(
    ("strategy", "custom_strategy"),
    [
        ("custom", None),
        ("meanReversion", CustomStrategyPayload(id=None, buy_conditions={}, sell_conditions={})),
    ],
)
def test_backtest_request_requires_custom_block_iff_custom_strategy(
    strategy: str,
    custom_strategy: CustomStrategyPayload | None,
) -> None:
    with pytest.raises(ValueError, match="customStrategy"):
        BacktestRequest(
            strategy=strategy,
            symbols=("AAPL",),  # type: ignore[arg-type]
            window=_window(),
            initial_capital=1000,
            shares_per_trade=1,
            parameters=MeanReversionParameters(),
            custom_strategy=custom_strategy,
        )


def test_backtest_response_requires_data_on_success() -> None:
    with pytest.raises(ValueError):
        BacktestResponse(success=True)


def test_failed_backtest_response_uses_generic_message_when_blank() -> None:
    assert BacktestResponse(success=False, error="  ").error == DEFAULT_FAILURE_MESSAGE
    assert BacktestResponse(success=False, error="No data").error == "No data"


def test_backtest_summary_reports_profitability_and_failed_symbols() -> None:
    summary = BacktestSummary(
        strategy="meanReversion",
        symbols=["AAPL", "ZZZZ"],  # type: ignore[arg-type]
        results=[  # type: ignore[arg-type]
            PerSymbolResult(symbol="AAPL", total_return=4.2),
            PerSymbolResult(symbol="ZZZZ", error="No data available"),
        ],
        total_return=4.2,
    )

    assert summary.is_profitable is True
    assert summary.failed_symbols() == ("ZZZZ",)
    assert summary.symbols == ("AAPL", "ZZZZ")


def test_user_strategy_record_freezes_config_snapshot() -> None:
    """
    Verify records keep immutable copies of source mappings.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Source mapping can be mutated by the caller afterwards.
    Raises:
        AssertionError: If record observes source mutations.
    Side Effects:
        None.
    """
    source = {"window": 20}
    record = UserStrategyRecord(
        id=1,
        name=" Saved ",
        strategy_type=" mean_reversion ",
        config=source,
    )
    source["window"] = 5

    assert record.name == "Saved"
    assert record.strategy_type == "mean_reversion"
    assert record.config["window"] == 20
    with pytest.raises(TypeError):
        record.config["window"] = 1  # type: ignore[index]


def test_user_unified_strategy_defaults_to_empty_config() -> None:
    strategy = UserUnifiedStrategy(id=None, name="Momentum", strategy_type="momentum")

    assert dict(strategy.config) == {}
    assert strategy.type == "user"


def test_form_fields_defaults_span_lookback_years_ending_today() -> None:
    """
    Verify default window ends today and leap days fall back to Feb 28.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Default sizing is 10000 capital and 100 shares per trade.
    Raises:
        AssertionError: If default form values differ.
    Side Effects:
        None.
    """
    fields = BacktestFormFields.defaults(today=date(2024, 2, 29))

    assert fields.start_date == date(2023, 2, 28)
    assert fields.end_date == date(2024, 2, 29)
    assert fields.initial_capital == 10000
    assert fields.shares_per_trade == 100
    assert BacktestFormFields.defaults(today=date(2024, 5, 10), lookback_years=2).start_date == (
        date(2022, 5, 10)
    )
    with pytest.raises(ValueError):
        BacktestFormFields.defaults(today=date(2024, 5, 10), lookback_years=0)


def test_precondition_error_uses_user_facing_message_by_default() -> None:
    error = BacktestPreconditionError("NoSymbolsSelected")

    assert error.message == "Please select at least one stock to test"
    assert str(error) == error.message
    assert dict(error.details) == {}
    assert precondition_message("InvalidDateRange") == "Start date must be before end date"


def test_service_error_falls_back_to_generic_message() -> None:
    error = BacktestServiceError(" ", error_code="BOT_LIMIT_EXCEEDED")

    assert error.service_message == DEFAULT_FAILURE_MESSAGE
    assert error.error_code == "BOT_LIMIT_EXCEEDED"
