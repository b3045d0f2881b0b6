"""
Built-in strategy hard-definition catalog grouped by strategy family.

Docs: docs/architecture/backtest/backtest-request-construction-v1.md
Related: tradelab.contexts.strategy_catalog.domain.entities.strategy_descriptor
"""

from __future__ import annotations

from tradelab.contexts.strategy_catalog.domain.entities import BasicStrategyDescriptor

from .mean_reversion import defs as mean_reversion_defs
from .sentiment import defs as sentiment_defs
from .trend import defs as trend_defs


def all_defs() -> tuple[BasicStrategyDescriptor, ...]:
    """
    Return the full built-in descriptor set in stable catalog order.

    Args:
        None.
    Returns:
        tuple[BasicStrategyDescriptor, ...]: meanReversion, movingAverageCrossover,
            momentum, bollingerBands, breakout, sentimentAnalysis.
    Assumptions:
        Each group-level defs() already returns deterministic tuples.
    Raises:
        None.
    Side Effects:
        None.
    """
    mean_reversion, bollinger = mean_reversion_defs()
    crossover, momentum, breakout = trend_defs()
    return (
        mean_reversion,
        crossover,
        momentum,
        bollinger,
        breakout,
        *sentiment_defs(),
    )


__all__ = ["all_defs"]
