from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from tradelab.contexts.strategy_catalog.application.ports import ParameterSchemaCatalog
from tradelab.contexts.strategy_catalog.domain.definitions import all_defs
from tradelab.contexts.strategy_catalog.domain.entities import (
    BasicStrategyDescriptor,
    ParameterSchema,
)
from tradelab.contexts.strategy_catalog.domain.errors import UnknownStrategyError
from tradelab.contexts.strategy_catalog.domain.services import normalize_strategy_type


@dataclass(frozen=True, slots=True)
class InMemoryParameterSchemaCatalog(ParameterSchemaCatalog):
    """
    Read-only catalog over an immutable tuple of built-in strategy descriptors.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/strategy_catalog/domain/definitions/__init__.py
      - src/tradelab/contexts/strategy_catalog/adapters/outbound/catalog/
        yaml_strategy_catalog_loader.py
      - apps/cli/wiring/modules/backtest.py
    """

    descriptors: tuple[BasicStrategyDescriptor, ...]
    _by_name: Mapping[str, BasicStrategyDescriptor] = field(
        default_factory=dict,
        init=False,
        repr=False,
        compare=False,
    )

    def __post_init__(self) -> None:
        """
        Freeze descriptors and build the canonical-name index.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Descriptor names are indexed by their canonical identifier.
        Raises:
            ValueError: If two descriptors normalize to the same identifier.
        Side Effects:
            Replaces index with a read-only mapping proxy.
        """
        descriptors = tuple(self.descriptors)
        index: dict[str, BasicStrategyDescriptor] = {}
        for descriptor in descriptors:
            key = normalize_strategy_type(descriptor.name)
            if key in index:
                raise ValueError(f"duplicate strategy in catalog: {key!r}")
            index[key] = descriptor
        object.__setattr__(self, "descriptors", descriptors)
        object.__setattr__(self, "_by_name", MappingProxyType(index))

    @classmethod
    def builtin(cls) -> InMemoryParameterSchemaCatalog:
        return cls(descriptors=all_defs())

    def list_descriptors(self) -> tuple[BasicStrategyDescriptor, ...]:
        return self.descriptors

    def get_descriptor(self, strategy_name: str) -> BasicStrategyDescriptor:
        """
        Resolve one descriptor by strategy name in any supported spelling.

        Args:
            strategy_name: Strategy identifier.
        Returns:
            BasicStrategyDescriptor: Matching descriptor.
        Assumptions:
            Lookup is performed by canonical identifier.
        Raises:
            UnknownStrategyError: If strategy is absent.
        Side Effects:
            None.
        """
        descriptor = self._by_name.get(normalize_strategy_type(strategy_name))
        if descriptor is None:
            raise UnknownStrategyError(strategy_name=strategy_name)
        return descriptor

    def get_schema(self, strategy_name: str) -> ParameterSchema:
        return self.get_descriptor(strategy_name).parameters
