from __future__ import annotations

from datetime import date, datetime

import pytest

from tradelab.shared_kernel.primitives import DateRange, Symbol, parse_iso_date


def test_symbol_normalizes_case_and_whitespace() -> None:
    assert Symbol(" aapl ").value == "AAPL"
    assert str(Symbol("msft")) == "MSFT"
    assert Symbol("aapl") == Symbol("AAPL")


@pytest.mark.parametrize("raw", ["", "   ", 42])
def test_symbol_rejects_blank_or_non_string_values(raw: object) -> None:
    with pytest.raises(ValueError):
        Symbol(raw)  # type: ignore[arg-type]


def test_date_range_parses_iso_strings_and_counts_inclusive_days() -> None:
    """
    Verify date range accepts ISO strings and exposes closed-interval day count.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Both window ends are simulated days.
    Raises:
        AssertionError: If parsed range or wire format differs.
    Side Effects:
        None.
    """
    window = DateRange.parse(start="2024-01-01", end="2024-01-31")

    assert window.start == date(2024, 1, 1)
    assert window.days() == 31
    assert window.to_wire() == ("2024-01-01", "2024-01-31")


def test_date_range_requires_start_before_end() -> None:
    with pytest.raises(ValueError, match="start < end"):
        DateRange(start=date(2024, 1, 2), end=date(2024, 1, 2))


@pytest.mark.parametrize("raw", ["2024-1-5", "2024/01/05", "2024-02-30", "20240105", ""])
def test_parse_iso_date_rejects_non_canonical_literals(raw: str) -> None:
    """
    Verify only strict `YYYY-MM-DD` calendar dates are accepted.

    Args:
        raw: Malformed date literal.
    Returns:
        None.
    Assumptions:
        Diagnostics include the field name.
    Raises:
        AssertionError: If malformed literal is accepted.
    Side Effects:
        None.
    """
    with pytest.raises(ValueError, match="startDate"):
        parse_iso_date(raw, field_name="startDate")


def test_parse_iso_date_narrows_datetime_to_date() -> None:
    parsed = parse_iso_date(datetime(2024, 3, 1, 15, 30), field_name="endDate")

    assert parsed == date(2024, 3, 1)
    assert type(parsed) is date
