from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Sequence

import yaml

from apps.cli.wiring.modules.backtest import CATALOG_SOURCES, BacktestClientWiring
from tradelab.contexts.backtest.application.ports import StrategyStore
from tradelab.contexts.backtest.application.services import (
    SessionStateCoordinator,
    UnifiedStrategyAdapter,
    map_backtest_exception,
)
from tradelab.contexts.backtest.domain.entities import (
    BacktestRequest,
    BacktestResponse,
    UserUnifiedStrategy,
)
from tradelab.contexts.strategy_catalog.adapters.outbound.catalog import (
    InMemoryParameterSchemaCatalog,
)
from tradelab.contexts.strategy_catalog.domain.errors import UnknownStrategyError
from tradelab.platform.errors import TradelabError

log = logging.getLogger(__name__)


class ConsoleReportListener:
    """
    Backtest result listener printing outcomes in `text` or `json` report format.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/backtest_result_listener.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    def __init__(self, *, report_format: str) -> None:
        self._report_format = report_format

    def on_backtest_completed(
        self,
        *,
        request: BacktestRequest,
        response: BacktestResponse,
    ) -> None:
        summary = response.data
        if summary is None:
            return
        if self._report_format == "json":
            print(
                json.dumps(
                    {"request": request.to_payload(), "result": dict(summary.raw_payload)},
                    ensure_ascii=False,
                    default=str,
                )
            )
            return
        start_date, end_date = request.window.to_wire()
        lines = [
            "backtest report:",
            f"- strategy: {request.strategy}",
            f"- window: {start_date} .. {end_date}",
            f"- total return: {summary.total_return * 100:.2f}%",
            f"- final portfolio value: {summary.final_portfolio_value:,.2f}",
            f"- win rate: {summary.win_rate * 100:.2f}%",
            f"- total trades: {summary.total_trades}",
            f"- max drawdown: {summary.max_drawdown * 100:.2f}%",
        ]
        for result in summary.results:
            if result.failed:
                lines.append(f"  - {result.symbol}: {result.error}")
                continue
            lines.append(
                f"  - {result.symbol}: return {result.total_return * 100:.2f}%, "
                f"trades {result.total_trades}"
            )
        print("\n".join(lines))

    def on_backtest_failed(self, *, error: TradelabError) -> None:
        if self._report_format == "json":
            print(json.dumps(error.to_payload(), ensure_ascii=False))
            return
        line = f"backtest failed: {error.message}"
        if error.reason is not None:
            line = f"{line} [{error.reason}]"
        if error.user_may_retry:
            line = f"{line} (the request itself was not rejected; try again)"
        print(line)


class RunBacktestCli:
    """
    `run` command: selects one strategy, applies parameter overrides, submits one backtest
    and optionally saves the tested strategy.
    """

    def __init__(self, *, wiring_factory: type[BacktestClientWiring] = BacktestClientWiring):
        self._wiring_factory = wiring_factory

    def run(self, argv: Sequence[str]) -> int:
        parser = _build_parser()
        ns = parser.parse_args(list(argv))

        wiring = self._wiring_factory(
            environ=os.environ,
            config_path=ns.config,
            catalog_source=ns.catalog,
        )
        config = wiring.config()
        catalog = wiring.catalog(config=config)
        listener = ConsoleReportListener(report_format=ns.report_format)
        coordinator = wiring.coordinator(config=config, catalog=catalog, listeners=(listener,))
        store = wiring.store(config=config)
        user_id = ns.user_id or config.user_id

        coordinator.set_symbols(ns.symbols.split(","))
        try:
            _select_strategy(
                ns=ns,
                coordinator=coordinator,
                adapter=wiring.adapter(catalog=catalog),
                catalog=catalog,
                store=store,
                user_id=user_id,
            )
        except LookupError as error:
            print(f"strategy not found: {error}")
            return 2
        except Exception as error:  # noqa: BLE001
            listener.on_backtest_failed(error=map_backtest_exception(error=error))
            return 1

        if ns.params:
            coordinator.update_parameters(dict(ns.params))
        form_changes = _form_changes(ns)
        if form_changes:
            coordinator.update_form_fields(**form_changes)

        try:
            response = coordinator.submit()
        except TradelabError:
            # listener already rendered the failure
            return 1
        if response is None:
            return 1

        if not ns.save:
            return 0
        if not user_id:
            print("--save requires --user-id or TRADELAB_USER_ID")
            return 2
        try:
            record = coordinator.save_from_result(
                store,
                user_id=user_id,
                name=ns.save_name,
                description=ns.save_description,
            )
        except TradelabError as error:
            listener.on_backtest_failed(error=error)
            return 1
        if ns.report_format == "json":
            print(json.dumps({"saved": {"id": record.id, "name": record.name}}, default=str))
        else:
            print(f"saved strategy {record.id}: {record.name}")
        return 0


def _select_strategy(
    *,
    ns: argparse.Namespace,
    coordinator: SessionStateCoordinator,
    adapter: UnifiedStrategyAdapter,
    catalog: InMemoryParameterSchemaCatalog,
    store: StrategyStore,
    user_id: str | None,
) -> None:
    """
    Resolve the strategy selected on the command line and select it in the session.

    Args:
        ns: Parsed arguments with one of `strategy`, `saved_strategy`, `custom_strategy`.
        coordinator: Session coordinator.
        adapter: Unified strategy adapter for store records.
        catalog: Strategy catalog.
        store: Strategy store used for saved and custom strategies.
        user_id: Owner id for saved strategies.
    Returns:
        None.
    Assumptions:
        Catalog names unknown to the catalog are submitted as-is without defaults.
    Raises:
        LookupError: If a saved or custom strategy id is not found.
        BacktestTransportError: If the store is unreachable.
        BacktestServiceError: If the store rejects the lookup.
    Side Effects:
        May read from the strategy store.
    """
    if ns.strategy is not None:
        try:
            coordinator.select_catalog_strategy(catalog.get_descriptor(ns.strategy))
        except UnknownStrategyError:
            log.info("strategy %r is not in catalog; submitting without defaults", ns.strategy)
            coordinator.select_strategy(
                UserUnifiedStrategy(id=None, name=ns.strategy, strategy_type=ns.strategy)
            )
        return

    if ns.saved_strategy is not None:
        records = list(store.list_public_strategies())
        if user_id:
            records = [
                *store.list_user_strategies(user_id=user_id, include_inactive=True),
                *records,
            ]
        matches = [record for record in records if str(record.id) == ns.saved_strategy]
        if not matches:
            raise LookupError(ns.saved_strategy)
        coordinator.select_strategy(adapter.unify(matches[:1], ())[0])
        return

    custom_records = store.list_custom_strategies(include_inactive=True)
    custom_matches = [
        record for record in custom_records if str(record.id) == ns.custom_strategy
    ]
    if not custom_matches:
        raise LookupError(ns.custom_strategy)
    coordinator.select_strategy(adapter.unify((), custom_matches[:1])[0])


def _form_changes(ns: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if ns.start_date is not None:
        changes["start_date"] = ns.start_date
    if ns.end_date is not None:
        changes["end_date"] = ns.end_date
    if ns.initial_capital is not None:
        changes["initial_capital"] = ns.initial_capital
    if ns.shares_per_trade is not None:
        changes["shares_per_trade"] = ns.shares_per_trade
    return changes


def parse_param(raw: str) -> tuple[str, Any]:
    """
    Parse one `--param key=value` argument.

    Args:
        raw: Raw argument text.
    Returns:
        tuple[str, Any]: Parameter name and YAML-typed value (`20` -> int, `true` -> bool).
    Assumptions:
        Values that are not valid YAML scalars are kept as plain strings.
    Raises:
        argparse.ArgumentTypeError: If `=` is missing or the key is blank.
    Side Effects:
        None.
    """
    key, separator, raw_value = raw.partition("=")
    key = key.strip()
    if not separator or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    try:
        value = yaml.safe_load(raw_value)
    except yaml.YAMLError:
        value = raw_value
    if isinstance(value, (list, dict)):
        value = raw_value
    return key, value


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="run")
    p.add_argument(
        "--config",
        default=None,
        help="Path to backtest_client.yaml (default: configs/<TRADELAB_ENV>/...)",
    )
    p.add_argument(
        "--catalog",
        choices=CATALOG_SOURCES,
        default="yaml",
        help="Strategy catalog source",
    )
    p.add_argument(
        "--symbols",
        required=True,
        help="Comma-separated tickers, e.g. AAPL,MSFT",
    )
    selection = p.add_mutually_exclusive_group(required=True)
    selection.add_argument("--strategy", default=None, help="Catalog strategy name")
    selection.add_argument("--saved-strategy", default=None, help="Saved strategy id")
    selection.add_argument("--custom-strategy", default=None, help="Custom strategy id")
    p.add_argument(
        "--param",
        dest="params",
        action="append",
        type=parse_param,
        default=[],
        help="Parameter override key=value (repeatable)",
    )
    p.add_argument("--start-date", default=None, help="YYYY-MM-DD")
    p.add_argument("--end-date", default=None, help="YYYY-MM-DD")
    p.add_argument("--initial-capital", type=float, default=None)
    p.add_argument("--shares-per-trade", type=int, default=None)
    p.add_argument("--user-id", default=None, help="Owner id for saved strategies")
    p.add_argument(
        "--save",
        action="store_true",
        help="Save the tested strategy with its results after a successful run",
    )
    p.add_argument("--save-name", default=None)
    p.add_argument("--save-description", default=None)
    p.add_argument(
        "--report-format",
        choices=("text", "json"),
        default="text",
        help="Output format",
    )
    return p
