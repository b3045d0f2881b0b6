from __future__ import annotations

from typing import Protocol

from tradelab.contexts.strategy_catalog.domain.entities import (
    BasicStrategyDescriptor,
    ParameterSchema,
)


class ParameterSchemaCatalog(Protocol):
    """
    Port for listing built-in strategies and resolving their parameter schemas.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/strategy_catalog/domain/entities/strategy_descriptor.py
      - src/tradelab/contexts/strategy_catalog/domain/errors/unknown_strategy_error.py
      - src/tradelab/contexts/strategy_catalog/adapters/outbound/catalog/
        in_memory_parameter_schema_catalog.py
    """

    def list_descriptors(self) -> tuple[BasicStrategyDescriptor, ...]:
        """
        Return all built-in strategy descriptors available in this catalog.

        Args:
            None.
        Returns:
            tuple[BasicStrategyDescriptor, ...]: Stable tuple of descriptors.
        Assumptions:
            Returned descriptors are immutable and safe to share between sessions.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def get_descriptor(self, strategy_name: str) -> BasicStrategyDescriptor:
        """
        Resolve one descriptor by strategy name in any supported spelling.

        Args:
            strategy_name: Strategy identifier; normalized before lookup.
        Returns:
            BasicStrategyDescriptor: Matching descriptor.
        Assumptions:
            Catalog identity space is canonical strategy identifiers.
        Raises:
            UnknownStrategyError: If the strategy is not present in the catalog.
        Side Effects:
            None.
        """
        ...

    def get_schema(self, strategy_name: str) -> ParameterSchema:
        """
        Resolve the read-only parameter schema of one strategy.

        Args:
            strategy_name: Strategy identifier; normalized before lookup.
        Returns:
            ParameterSchema: Parameter name to definition or legacy scalar mapping.
        Assumptions:
            Schema mappings are read-only.
        Raises:
            UnknownStrategyError: If the strategy is not present in the catalog.
        Side Effects:
            None.
        """
        ...
