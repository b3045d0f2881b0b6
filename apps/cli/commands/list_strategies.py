from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Sequence

from apps.cli.wiring.modules.backtest import CATALOG_SOURCES, BacktestClientWiring
from tradelab.contexts.backtest.application.services import map_backtest_exception
from tradelab.contexts.backtest.domain.entities import (
    CustomUnifiedStrategy,
    UnifiedStrategy,
    UserUnifiedStrategy,
)
from tradelab.contexts.strategy_catalog.application.services import ParameterDefaultsResolver

log = logging.getLogger(__name__)


class ListStrategiesCli:
    """
    `strategies` command: prints the strategy catalog with parameter defaults and,
    optionally, the saved strategies of one user.
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
        resolver = ParameterDefaultsResolver(catalog=catalog)

        catalog_rows = [
            {
                "name": descriptor.name,
                "label": descriptor.label,
                "category": descriptor.category,
                "enabled": descriptor.enabled,
                "defaults": resolver.resolve_defaults(descriptor.name),
            }
            for descriptor in catalog.list_descriptors()
        ]

        saved_rows: list[dict[str, Any]] = []
        if ns.saved:
            user_id = ns.user_id or config.user_id
            if not user_id:
                parser.error("--saved requires --user-id or TRADELAB_USER_ID")
            store = wiring.store(config=config)
            include_inactive = ns.include_inactive or config.include_inactive
            try:
                user_records = store.list_user_strategies(
                    user_id=user_id,
                    include_inactive=include_inactive,
                )
                public_records = store.list_public_strategies()
                custom_records = store.list_custom_strategies(include_inactive=include_inactive)
            except Exception as error:  # noqa: BLE001
                mapped = map_backtest_exception(error=error)
                log.error("cannot list saved strategies: %s", mapped.message)
                print(json.dumps(mapped.to_payload(), ensure_ascii=False))
                return 1
            known_ids = {record.id for record in user_records}
            community = [record for record in public_records if record.id not in known_ids]
            unified = wiring.adapter(catalog=catalog).unify(
                [*user_records, *community],
                custom_records,
            )
            saved_rows = [_unified_row(strategy) for strategy in unified]

        if ns.report_format == "json":
            print(
                json.dumps(
                    {"catalog": catalog_rows, "saved": saved_rows},
                    ensure_ascii=False,
                    default=str,
                )
            )
            return 0

        lines = ["strategies:"]
        for row in catalog_rows:
            defaults = ", ".join(f"{key}={value}" for key, value in row["defaults"].items())
            lines.append(f"- {row['name']} ({row['label']}): {defaults or '-'}")
        if ns.saved:
            lines.append("saved strategies:")
            for row in saved_rows:
                kind = row["strategy_type"] or "conditions"
                lines.append(f"- [{row['type']}] {row['id']} {row['name']} ({kind})")
        print("\n".join(lines))
        return 0


def _unified_row(strategy: UnifiedStrategy) -> dict[str, Any]:
    if isinstance(strategy, UserUnifiedStrategy):
        strategy_type: str | None = strategy.strategy_type
    elif isinstance(strategy, CustomUnifiedStrategy):
        strategy_type = None
    else:
        raise TypeError(f"unsupported unified strategy: {type(strategy).__name__}")
    return {
        "type": strategy.type,
        "id": strategy.id,
        "name": strategy.name,
        "strategy_type": strategy_type,
        "is_active": strategy.is_active,
        "is_public": strategy.is_public,
    }


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="strategies")
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
        "--saved",
        action="store_true",
        help="Also list user, community and custom strategies from the strategy store",
    )
    p.add_argument("--user-id", default=None, help="Owner id for --saved")
    p.add_argument(
        "--include-inactive",
        action="store_true",
        help="Include deactivated saved strategies",
    )
    p.add_argument(
        "--report-format",
        choices=("text", "json"),
        default="text",
        help="Output format",
    )
    return p
