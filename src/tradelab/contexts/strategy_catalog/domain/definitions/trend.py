"""
Hard strategy definitions for trend-following, momentum and breakout families.

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
from tradelab.contexts.strategy_catalog.domain.services import (
    BREAKOUT,
    MOMENTUM,
    MOVING_AVERAGE_CROSSOVER,
)


def _days(
    name: str,
    *,
    default: int,
    min_value: int,
    max_value: int,
    description: str,
) -> ParameterDef:
    return ParameterDef(
        name=name,
        kind=ParameterKind.NUMBER,
        default=default,
        description=description,
        min_value=min_value,
        max_value=max_value,
    )


def defs() -> tuple[BasicStrategyDescriptor, ...]:
    """
    Return hard trend-group descriptors in catalog order.

    Args:
        None.
    Returns:
        tuple[BasicStrategyDescriptor, ...]: Crossover, momentum and breakout descriptors.
    Assumptions:
        Strategy names are canonical identifiers.
    Raises:
        ValueError: If any definition violates domain invariants.
    Side Effects:
        None.
    """
    crossover = BasicStrategyDescriptor(
        name=MOVING_AVERAGE_CROSSOVER,
        display_name="Moving Average Crossover",
        description="Buy when fast MA crosses above slow MA, sell when below",
        category="Trend Following",
        parameters={
            "fastWindow": _days(
                "fastWindow",
                default=10,
                min_value=5,
                max_value=50,
                description="Fast moving average window in days",
            ),
            "slowWindow": _days(
                "slowWindow",
                default=30,
                min_value=10,
                max_value=200,
                description="Slow moving average window in days",
            ),
            "maType": ParameterDef(
                name="maType",
                kind=ParameterKind.SELECT,
                default="SMA",
                description="Type of moving average",
                options=("SMA", "EMA"),
            ),
        },
    )
    momentum = BasicStrategyDescriptor(
        name=MOMENTUM,
        display_name="Momentum",
        description="Uses RSI and price momentum for overbought/oversold signals",
        category="Momentum",
        parameters={
            "rsiWindow": _days(
                "rsiWindow",
                default=14,
                min_value=5,
                max_value=50,
                description="RSI calculation window in days",
            ),
            "rsiOverbought": ParameterDef(
                name="rsiOverbought",
                kind=ParameterKind.NUMBER,
                default=70,
                description="RSI overbought threshold",
                min_value=60,
                max_value=90,
            ),
            "rsiOversold": ParameterDef(
                name="rsiOversold",
                kind=ParameterKind.NUMBER,
                default=30,
                description="RSI oversold threshold",
                min_value=10,
                max_value=40,
            ),
            "momentumWindow": _days(
                "momentumWindow",
                default=10,
                min_value=5,
                max_value=50,
                description="Price momentum calculation window in days",
            ),
            "momentumThreshold": ParameterDef(
                name="momentumThreshold",
                kind=ParameterKind.NUMBER,
                default=0.02,
                description="Minimum momentum percentage (0.02 = 2%)",
                min_value=0.01,
                max_value=0.1,
                step=0.01,
            ),
        },
    )
    breakout = BasicStrategyDescriptor(
        name=BREAKOUT,
        display_name="Breakout",
        description="Identifies support/resistance levels and trades breakouts",
        category="Breakout",
        parameters={
            "lookbackWindow": _days(
                "lookbackWindow",
                default=20,
                min_value=5,
                max_value=100,
                description="Window to identify support/resistance levels in days",
            ),
            "breakoutThreshold": ParameterDef(
                name="breakoutThreshold",
                kind=ParameterKind.NUMBER,
                default=0.01,
                description="Minimum percentage move to confirm breakout (0.01 = 1%)",
                min_value=0.005,
                max_value=0.05,
                step=0.01,
            ),
            "minVolumeRatio": ParameterDef(
                name="minVolumeRatio",
                kind=ParameterKind.NUMBER,
                default=1.5,
                description="Minimum volume ratio vs average (1.5 = 50% above average)",
                min_value=1.0,
                max_value=5.0,
                step=0.1,
            ),
            "confirmationPeriod": _days(
                "confirmationPeriod",
                default=2,
                min_value=1,
                max_value=5,
                description="Days to hold position after breakout",
            ),
        },
    )
    return crossover, momentum, breakout
