"""
Hard strategy definitions for the mean-reversion group.

Docs: docs/architecture/backtest/backtest-request-construction-v1.md
Related: tradelab.contexts.strategy_catalog.domain.entities.strategy_descriptor,
  tradelab.contexts.strategy_catalog.domain.entities.parameter_def
"""

from __future__ import annotations

from tradelab.contexts.strategy_catalog.domain.entities import (
    BasicStrategyDescriptor,
    ParameterDef,
    ParameterKind,
)
from tradelab.contexts.strategy_catalog.domain.services import BOLLINGER_BANDS, MEAN_REVERSION

_CATEGORY = "Mean Reversion"


def defs() -> tuple[BasicStrategyDescriptor, ...]:
    """
    Return hard mean-reversion descriptors in catalog order.

    Args:
        None.
    Returns:
        tuple[BasicStrategyDescriptor, ...]: Immutable ordered descriptors.
    Assumptions:
        Strategy names are canonical identifiers.
    Raises:
        ValueError: If any definition violates domain invariants.
    Side Effects:
        None.
    """
    return (
        BasicStrategyDescriptor(
            name=MEAN_REVERSION,
            display_name="Mean Reversion",
            description="Buy when price is below moving average by threshold, sell when above",
            category=_CATEGORY,
            parameters={
                "window": ParameterDef(
                    name="window",
                    kind=ParameterKind.NUMBER,
                    default=20,
                    description="Moving average window in days",
                    min_value=5,
                    max_value=200,
                ),
                "threshold": ParameterDef(
                    name="threshold",
                    kind=ParameterKind.NUMBER,
                    default=0.05,
                    description="Percentage threshold for buy/sell signals (0.05 = 5%)",
                    min_value=0.01,
                    max_value=0.2,
                    step=0.01,
                ),
            },
        ),
        BasicStrategyDescriptor(
            name=BOLLINGER_BANDS,
            display_name="Bollinger Bands",
            description="Buy when price touches lower band, sell when touches upper band",
            category=_CATEGORY,
            parameters={
                "window": ParameterDef(
                    name="window",
                    kind=ParameterKind.NUMBER,
                    default=20,
                    description="Moving average window in days",
                    min_value=5,
                    max_value=50,
                ),
                "multiplier": ParameterDef(
                    name="multiplier",
                    kind=ParameterKind.NUMBER,
                    default=2.0,
                    description="Standard deviation multiplier",
                    min_value=1.0,
                    max_value=3.0,
                    step=0.1,
                ),
            },
        ),
    )
