from __future__ import annotations

import logging

import pytest

from tradelab.contexts.backtest.domain.errors import BacktestPreconditionError
from tradelab.contexts.backtest.domain.value_objects import (
    BollingerBandsParameters,
    BreakoutParameters,
    CustomConditionsParameters,
    MeanReversionParameters,
    MomentumParameters,
    MovingAverageCrossoverParameters,
    PassthroughParameters,
    coerce_parameter_value,
    parameter_type_for,
    parameters_for,
)


def test_mean_reversion_record_emits_only_supplied_fields() -> None:
    """
    Verify typed record keeps supplied values and omits unset fields from payload.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Integral floats are narrowed to `int` for integer fields.
    Raises:
        AssertionError: If payload contains missing fields or wrong values.
    Side Effects:
        None.
    """
    record = MeanReversionParameters.from_mapping({"window": 20.0})

    assert record == MeanReversionParameters(window=20)
    assert record.to_payload() == {"window": 20}
    assert isinstance(record.to_payload()["window"], int)


def test_crossover_legacy_aliases_are_renamed_to_wire_names() -> None:
    record = MovingAverageCrossoverParameters.from_mapping(
        {"shortWindow": 5, "longWindow": 50, "maType": "EMA"}
    )

    assert record.to_payload() == {"fastWindow": 5, "slowWindow": 50, "maType": "EMA"}


@pytest.mark.parametrize(
    "values",
    [
        {"fastWindow": 12, "shortWindow": 5},
        {"shortWindow": 5, "fastWindow": 12},
    ],
)
def test_canonical_name_wins_over_alias_in_any_order(values: dict[str, int]) -> None:
    """
    Verify canonical wire names take precedence over legacy aliases.

    Args:
        values: Mapping with both canonical and alias spelling.
    Returns:
        None.
    Assumptions:
        Precedence does not depend on mapping order.
    Raises:
        AssertionError: If alias value overrides canonical value.
    Side Effects:
        None.
    """
    record = MovingAverageCrossoverParameters.from_mapping(values)

    assert record.to_payload() == {"fastWindow": 12}


def test_family_specific_aliases_resolve_per_strategy() -> None:
    """
    Verify the same legacy key maps to different fields depending on the family.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `window` and `threshold` are canonical for mean reversion only.
    Raises:
        AssertionError: If alias mapping differs.
    Side Effects:
        None.
    """
    legacy = {"window": 15, "threshold": 0.03}

    assert MomentumParameters.from_mapping(legacy).to_payload() == {
        "momentumWindow": 15,
        "momentumThreshold": 0.03,
    }
    assert BreakoutParameters.from_mapping(legacy).to_payload() == {
        "lookbackWindow": 15,
        "breakoutThreshold": 0.03,
    }
    assert BollingerBandsParameters.from_mapping({"numStdDev": 2.5}).to_payload() == {
        "multiplier": 2.5
    }


def test_envelope_keys_are_never_taken_from_parameters() -> None:
    record = parameters_for(
        "meanReversion",
        {"strategy": "momentum", "symbols": ["X"], "initialCapital": 1, "window": 10},
    )

    assert record.to_payload() == {"window": 10}


def test_undeclared_parameters_are_dropped_with_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """
    Verify unknown parameter names never reach the request body.

    Args:
        caplog: pytest log capture fixture.
    Returns:
        None.
    Assumptions:
        Dropping is reported on the module logger at WARNING level.
    Raises:
        AssertionError: If undeclared key is kept or warning is missing.
    Side Effects:
        None.
    """
    with caplog.at_level(logging.WARNING):
        record = MeanReversionParameters.from_mapping({"window": 20, "rsiWindow": 14})

    assert record.to_payload() == {"window": 20}
    assert "rsiWindow" in caplog.text


def test_none_values_are_skipped() -> None:
    record = MeanReversionParameters.from_mapping({"window": None, "threshold": 0.1})

    assert record.to_payload() == {"threshold": 0.1}


@pytest.mark.parametrize(
    ("values", "path", "expected"),
    [
        ({"window": "20"}, "window", "int"),
        ({"window": 20.5}, "window", "int"),
        ({"window": True}, "window", "int"),
        ({"threshold": "0.05"}, "threshold", "float"),
        ({"threshold": False}, "threshold", "float"),
    ],
)
def test_kind_mismatch_raises_invalid_strategy_parameter(
    values: dict[str, object],
    path: str,
    expected: str,
) -> None:
    """
    Verify mismatched value kinds fail with parameter path in error details.

    Args:
        values: Parameter mapping with one wrongly typed value.
        path: Offending parameter name.
        expected: Declared value kind.
    Returns:
        None.
    Assumptions:
        Bool is never accepted as a number.
    Raises:
        AssertionError: If error code or details differ.
    Side Effects:
        None.
    """
    with pytest.raises(BacktestPreconditionError) as error_info:
        MeanReversionParameters.from_mapping(values)

    assert error_info.value.code == "InvalidStrategyParameter"
    assert error_info.value.details["path"] == path
    assert error_info.value.details["expected"] == expected
    assert path in error_info.value.message


def test_alias_kind_mismatch_reports_alias_path() -> None:
    with pytest.raises(BacktestPreconditionError) as error_info:
        MovingAverageCrossoverParameters.from_mapping({"shortWindow": "five"})

    assert error_info.value.details["path"] == "shortWindow"


def test_coerce_parameter_value_accepts_ints_for_float_kind() -> None:
    assert coerce_parameter_value(2, kind="float", path="multiplier") == 2
    assert coerce_parameter_value("SMA", kind="str", path="maType") == "SMA"
    assert coerce_parameter_value(True, kind="bool", path="flag") is True


def test_custom_conditions_record_ignores_condition_keys() -> None:
    record = CustomConditionsParameters.from_mapping(
        {"buy_conditions": {"op": "AND"}, "sell_conditions": {"op": "OR"}}
    )

    assert record.to_payload() == {}


def test_unknown_strategy_uses_passthrough_record() -> None:
    """
    Verify unknown identifiers forward parameters unchanged except envelope keys.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Execution service may learn new families before this client.
    Raises:
        AssertionError: If passthrough payload differs.
    Side Effects:
        None.
    """
    record = parameters_for("pairsTrading", {"lookback": 30, "strategy": "x", "hedge": "beta"})

    assert isinstance(record, PassthroughParameters)
    assert record.to_payload() == {"lookback": 30, "hedge": "beta"}
    assert parameter_type_for("pairsTrading") is None
    assert parameter_type_for("momentum") is MomentumParameters
