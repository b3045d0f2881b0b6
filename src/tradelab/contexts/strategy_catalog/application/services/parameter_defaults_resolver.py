from __future__ import annotations

import logging
from typing import Any

from tradelab.contexts.strategy_catalog.application.ports import ParameterSchemaCatalog
from tradelab.contexts.strategy_catalog.domain.entities import ParameterDef
from tradelab.contexts.strategy_catalog.domain.errors import UnknownStrategyError
from tradelab.contexts.strategy_catalog.domain.services import normalize_strategy_type

log = logging.getLogger(__name__)


class ParameterDefaultsResolver:
    """
    ParameterDefaultsResolver — builds initial parameter values from catalog schemas.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/strategy_catalog/application/ports/parameter_schema_catalog.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
    """

    def __init__(self, *, catalog: ParameterSchemaCatalog) -> None:
        if catalog is None:  # type: ignore[truthy-bool]
            raise ValueError("ParameterDefaultsResolver requires catalog")
        self._catalog = catalog

    def resolve_defaults(self, strategy_name: str) -> dict[str, Any]:
        """
        Extract default values for every structured parameter of one strategy.

        Args:
            strategy_name: Strategy identifier in any supported spelling.
        Returns:
            dict[str, Any]: Fresh `parameter -> default` mapping in schema order.
        Assumptions:
            Legacy bare-scalar entries and definitions without default are skipped.
        Raises:
            None.
        Side Effects:
            None.
        """
        canonical_name = normalize_strategy_type(strategy_name)
        try:
            schema = self._catalog.get_schema(canonical_name)
        except UnknownStrategyError:
            log.debug("no parameter schema for strategy %r, using empty defaults", strategy_name)
            return {}

        defaults: dict[str, Any] = {}
        for parameter_name, entry in schema.items():
            if isinstance(entry, ParameterDef) and entry.has_default:
                defaults[parameter_name] = entry.default
        return defaults
