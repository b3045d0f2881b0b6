from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

DEFAULT_INITIAL_CAPITAL = 10000
DEFAULT_SHARES_PER_TRADE = 100
DEFAULT_LOOKBACK_YEARS = 1

FormDate = Union[date, str]


@dataclass(frozen=True, slots=True)
class BacktestFormFields:
    """
    BacktestFormFields — raw test window and sizing inputs edited by the user.

    Values are kept as entered; they are validated by the request builder so that an
    in-progress edit never raises.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - src/tradelab/contexts/backtest/adapters/outbound/config/backtest_client_config.py
    """

    start_date: FormDate
    end_date: FormDate
    initial_capital: float | int = DEFAULT_INITIAL_CAPITAL
    shares_per_trade: int = DEFAULT_SHARES_PER_TRADE

    @classmethod
    def defaults(
        cls,
        *,
        today: date,
        initial_capital: float | int = DEFAULT_INITIAL_CAPITAL,
        shares_per_trade: int = DEFAULT_SHARES_PER_TRADE,
        lookback_years: int = DEFAULT_LOOKBACK_YEARS,
    ) -> BacktestFormFields:
        """
        Build initial form values ending today.

        Args:
            today: Current local calendar day.
            initial_capital: Starting capital.
            shares_per_trade: Maximum shares per trade.
            lookback_years: Window length in calendar years.
        Returns:
            BacktestFormFields: Window `[today - lookback_years, today]`.
        Assumptions:
            Feb 29 maps to Feb 28 when the start year is not a leap year.
        Raises:
            ValueError: If `lookback_years` is not positive.
        Side Effects:
            None.
        """
        if lookback_years <= 0:
            raise ValueError("lookback_years must be > 0")
        return cls(
            start_date=_years_before(today, years=lookback_years),
            end_date=today,
            initial_capital=initial_capital,
            shares_per_trade=shares_per_trade,
        )


def _years_before(day: date, *, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)
