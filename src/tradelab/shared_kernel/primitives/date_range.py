from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    DateRange — trading window of calendar days for one backtest run.

    Semantics:
    - closed interval [start, end]: both days are simulated.

    Invariants:
    - start < end
    - wire format is ISO `YYYY-MM-DD`
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(
                f"DateRange requires start < end, got start={self.start} end={self.end}"
            )

    @classmethod
    def parse(cls, *, start: str | date, end: str | date) -> DateRange:
        """Build range from ISO strings or `date` values."""
        return cls(
            start=parse_iso_date(start, field_name="start"),
            end=parse_iso_date(end, field_name="end"),
        )

    def days(self) -> int:
        """Number of calendar days in the window, both ends included."""
        return (self.end - self.start).days + 1

    def to_wire(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()


def parse_iso_date(value: str | date, *, field_name: str) -> date:
    """
    Parse strict `YYYY-MM-DD` date literal.

    Args:
        value: ISO date string or an already parsed `date`.
        field_name: Field name used in diagnostics.
    Returns:
        date: Parsed calendar date.
    Assumptions:
        `datetime` values are narrowed to their date part.
    Raises:
        ValueError: If value is not a valid ISO calendar date.
    Side Effects:
        None.
    """
    if isinstance(value, date):
        return value if type(value) is date else date(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a YYYY-MM-DD string, got {type(value).__name__}")
    raw = value.strip()
    if len(raw) != 10:
        raise ValueError(f"{field_name} must use YYYY-MM-DD format, got {value!r}")
    try:
        return date.fromisoformat(raw)
    except ValueError as error:
        raise ValueError(f"{field_name} must use YYYY-MM-DD format, got {value!r}") from error
