from __future__ import annotations

import copy
import logging
from typing import Any, Iterable

from tradelab.contexts.backtest.domain.entities import (
    CustomStrategyRecord,
    CustomUnifiedStrategy,
    UnifiedStrategy,
    UserStrategyRecord,
    UserUnifiedStrategy,
)
from tradelab.contexts.backtest.domain.errors import BacktestPreconditionError
from tradelab.contexts.strategy_catalog.application.services import ParameterDefaultsResolver
from tradelab.contexts.strategy_catalog.domain.entities import BasicStrategyDescriptor

log = logging.getLogger(__name__)


class UnifiedStrategyAdapter:
    """
    UnifiedStrategyAdapter — merges catalog, user-saved and custom strategy records into one
    selectable `UnifiedStrategy` list and derives active parameters of a selection.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/domain/entities/unified_strategy.py
      - src/tradelab/contexts/strategy_catalog/application/services/
        parameter_defaults_resolver.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    def __init__(self, *, defaults_resolver: ParameterDefaultsResolver) -> None:
        if defaults_resolver is None:  # type: ignore[truthy-bool]
            raise ValueError("UnifiedStrategyAdapter requires defaults_resolver")
        self._defaults_resolver = defaults_resolver

    def unify(
        self,
        user_records: Iterable[UserStrategyRecord],
        custom_records: Iterable[CustomStrategyRecord],
        *,
        active_only: bool = False,
    ) -> list[UnifiedStrategy]:
        """
        Convert source records into unified strategies.

        Args:
            user_records: User-saved and community records, in source order.
            custom_records: Condition-based records, in source order.
            active_only: Keep only records flagged `is_active`.
        Returns:
            list[UnifiedStrategy]: User entries first, then custom entries, no re-sorting.
        Assumptions:
            Source records are never mutated; each entry keeps its record in `original`.
        Raises:
            None.
        Side Effects:
            None.
        """
        unified: list[UnifiedStrategy] = []
        for record in user_records:
            if active_only and not record.is_active:
                continue
            unified.append(
                UserUnifiedStrategy(
                    id=record.id,
                    name=record.name,
                    strategy_type=record.strategy_type,
                    config=record.config,
                    description=record.description,
                    is_active=record.is_active,
                    is_public=record.is_public,
                    original=record,
                )
            )
        for custom_record in custom_records:
            if active_only and not custom_record.is_active:
                continue
            unified.append(
                CustomUnifiedStrategy(
                    id=custom_record.id,
                    name=custom_record.name,
                    buy_conditions=custom_record.buy_conditions,
                    sell_conditions=custom_record.sell_conditions,
                    description=custom_record.description,
                    is_active=custom_record.is_active,
                    is_public=custom_record.is_public,
                    original=custom_record,
                )
            )
        return unified

    def from_descriptor(self, descriptor: BasicStrategyDescriptor) -> UserUnifiedStrategy:
        return UserUnifiedStrategy(
            id=None,
            name=descriptor.label,
            strategy_type=descriptor.name,
            description=descriptor.description,
            is_active=descriptor.enabled,
            original=descriptor,
        )

    def active_parameters(self, strategy: UnifiedStrategy) -> dict[str, Any]:
        """
        Derive the parameter values a fresh selection starts with.

        Args:
            strategy: Selected unified strategy.
        Returns:
            dict[str, Any]: Deep copy of the saved config, the custom condition trees,
                or schema defaults of `strategy_type`.
        Assumptions:
            Unknown strategy types resolve to `{}`.
        Raises:
            BacktestPreconditionError: `InvalidStrategyVariant` for non-union values.
        Side Effects:
            None.
        """
        if isinstance(strategy, UserUnifiedStrategy):
            if len(strategy.config) > 0:
                return copy.deepcopy(dict(strategy.config))
            if not strategy.strategy_type:
                return {}
            return self._defaults_resolver.resolve_defaults(strategy.strategy_type)
        if isinstance(strategy, CustomUnifiedStrategy):
            return {
                "buy_conditions": copy.deepcopy(strategy.buy_conditions),
                "sell_conditions": copy.deepcopy(strategy.sell_conditions),
            }
        log.debug("cannot derive parameters for %s", type(strategy).__name__)
        raise BacktestPreconditionError("InvalidStrategyVariant")
