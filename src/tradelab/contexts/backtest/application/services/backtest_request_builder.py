from __future__ import annotations

import logging
import math
from typing import Any

from tradelab.contexts.backtest.application.dto import BacktestSelection
from tradelab.contexts.backtest.domain.entities import (
    BacktestRequest,
    CustomStrategyPayload,
    CustomUnifiedStrategy,
    UserUnifiedStrategy,
)
from tradelab.contexts.backtest.domain.errors import BacktestPreconditionError
from tradelab.contexts.backtest.domain.value_objects import (
    BacktestFormFields,
    CustomConditionsParameters,
    parameters_for,
)
from tradelab.contexts.strategy_catalog.domain.services import CUSTOM, normalize_strategy_type
from tradelab.shared_kernel.primitives import DateRange, Symbol, parse_iso_date

log = logging.getLogger(__name__)


class BacktestRequestBuilder:
    """
    BacktestRequestBuilder — validates a session selection and builds one `BacktestRequest`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/domain/entities/backtest_request.py
      - src/tradelab/contexts/backtest/domain/value_objects/strategy_parameters.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    def build(
        self,
        selection: BacktestSelection,
        form_fields: BacktestFormFields,
    ) -> BacktestRequest:
        """
        Validate preconditions in fixed order and build the outbound request.

        Args:
            selection: Symbols, selected strategy and active parameters.
            form_fields: Test window and sizing inputs.
        Returns:
            BacktestRequest: Request with `customStrategy` iff strategy is `custom`.
        Assumptions:
            Checks short-circuit in order: symbols, strategy presence, strategy variant,
            form fields, parameter kinds.
        Raises:
            BacktestPreconditionError: First failing precondition.
        Side Effects:
            None.
        """
        symbols = _validated_symbols(selection.symbols)
        strategy = selection.strategy
        if strategy is None:
            raise BacktestPreconditionError("NoStrategySelected")

        custom_strategy: CustomStrategyPayload | None = None
        if isinstance(strategy, UserUnifiedStrategy):
            if not strategy.strategy_type:
                raise BacktestPreconditionError(
                    "InvalidStrategyVariant",
                    details={"cause": "missing strategy_type"},
                )
            outbound_strategy = normalize_strategy_type(strategy.strategy_type)
            if outbound_strategy == CUSTOM:
                # Condition trees only travel with a custom record.
                raise BacktestPreconditionError(
                    "InvalidStrategyVariant",
                    details={"cause": "user strategy cannot be custom"},
                )
        elif isinstance(strategy, CustomUnifiedStrategy):
            if not strategy.has_conditions:
                raise BacktestPreconditionError("CustomStrategyMissingConditions")
            outbound_strategy = CUSTOM
            custom_strategy = CustomStrategyPayload(
                id=strategy.id,
                buy_conditions=strategy.buy_conditions,
                sell_conditions=strategy.sell_conditions,
            )
        else:
            raise BacktestPreconditionError(
                "InvalidStrategyVariant",
                details={"type": type(strategy).__name__},
            )

        window = _validated_window(form_fields)
        initial_capital = _validated_initial_capital(form_fields.initial_capital)
        shares_per_trade = _validated_shares_per_trade(form_fields.shares_per_trade)

        if custom_strategy is not None:
            parameters = CustomConditionsParameters.from_mapping(selection.parameters)
        else:
            parameters = parameters_for(outbound_strategy, selection.parameters)

        request = BacktestRequest(
            strategy=outbound_strategy,
            symbols=symbols,
            window=window,
            initial_capital=initial_capital,
            shares_per_trade=shares_per_trade,
            parameters=parameters,
            custom_strategy=custom_strategy,
        )
        log.debug(
            "built backtest request strategy=%s symbols=%d",
            request.strategy,
            len(request.symbols),
        )
        return request


def _validated_symbols(raw_symbols: tuple[str | Symbol, ...]) -> tuple[Symbol, ...]:
    symbols: list[Symbol] = []
    seen: set[str] = set()
    for raw in raw_symbols:
        text = raw.value if isinstance(raw, Symbol) else raw
        if not isinstance(text, str) or not text.strip():
            continue
        symbol = Symbol(text)
        if symbol.value in seen:
            continue
        seen.add(symbol.value)
        symbols.append(symbol)
    if not symbols:
        raise BacktestPreconditionError("NoSymbolsSelected")
    return tuple(symbols)


def _validated_window(form_fields: BacktestFormFields) -> DateRange:
    try:
        start = parse_iso_date(form_fields.start_date, field_name="startDate")
        end = parse_iso_date(form_fields.end_date, field_name="endDate")
    except ValueError as error:
        raise BacktestPreconditionError(
            "InvalidDateRange",
            message="Invalid date format. Use YYYY-MM-DD format",
            details={"cause": str(error)},
        ) from error
    if start >= end:
        raise BacktestPreconditionError(
            "InvalidDateRange",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
    return DateRange(start=start, end=end)


def _validated_initial_capital(value: Any) -> float | int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value <= 0
    ):
        raise BacktestPreconditionError(
            "InvalidInitialCapital",
            details={"initialCapital": value},
        )
    return value


def _validated_shares_per_trade(value: Any) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise BacktestPreconditionError(
            "InvalidSharesPerTrade",
            details={"sharesPerTrade": value},
        )
    return value
