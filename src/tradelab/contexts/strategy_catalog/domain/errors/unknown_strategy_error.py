from __future__ import annotations


class UnknownStrategyError(LookupError):
    """
    Raised when a strategy name is not available in the parameter schema catalog.

    Docs: docs/architecture/backtest/backtest-request-construction-v1.md
    Related: ..services.strategy_type_normalizer,
      ...application.ports.parameter_schema_catalog
    """

    def __init__(self, *, strategy_name: str) -> None:
        super().__init__(f"Unknown strategy: {strategy_name!r}")
        self.strategy_name = strategy_name
