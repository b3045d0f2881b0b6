"""
Hard strategy definition for the news-sentiment family.

Docs: docs/architecture/backtest/backtest-request-construction-v1.md
Related: tradelab.contexts.strategy_catalog.domain.entities.strategy_descriptor
"""

from __future__ import annotations

from tradelab.contexts.strategy_catalog.domain.entities import (
    BasicStrategyDescriptor,
    ParameterDef,
    ParameterKind,
)
from tradelab.contexts.strategy_catalog.domain.services import SENTIMENT_ANALYSIS


def defs() -> tuple[BasicStrategyDescriptor, ...]:
    """Return the sentiment-analysis descriptor; the news source is backend-controlled."""
    return (
        BasicStrategyDescriptor(
            name=SENTIMENT_ANALYSIS,
            display_name="Sentiment Analysis",
            description="Aggregates recent news sentiment to produce BUY/SELL signals",
            category="News/Sentiment",
            parameters={
                "lookbackDays": ParameterDef(
                    name="lookbackDays",
                    kind=ParameterKind.NUMBER,
                    default=3,
                    description="Days of news to consider",
                    min_value=1,
                    max_value=30,
                ),
                "pollIntervalMinutes": ParameterDef(
                    name="pollIntervalMinutes",
                    kind=ParameterKind.NUMBER,
                    default=0,
                    description="Polling interval for fetching fresh news",
                    min_value=0,
                    max_value=120,
                ),
                "minArticles": ParameterDef(
                    name="minArticles",
                    kind=ParameterKind.NUMBER,
                    default=2,
                    description="Minimum number of articles required to act",
                    min_value=1,
                    max_value=50,
                ),
                "buyThreshold": ParameterDef(
                    name="buyThreshold",
                    kind=ParameterKind.NUMBER,
                    default=0.4,
                    description="Aggregate sentiment threshold to trigger BUY (0.4 = 40%)",
                    min_value=0.0,
                    max_value=1.0,
                    step=0.05,
                ),
                "sellThreshold": ParameterDef(
                    name="sellThreshold",
                    kind=ParameterKind.NUMBER,
                    default=-0.4,
                    description="Aggregate sentiment threshold to trigger SELL (-0.4 = -40%)",
                    min_value=-1.0,
                    max_value=0.0,
                    step=0.05,
                ),
                "titleWeight": ParameterDef(
                    name="titleWeight",
                    kind=ParameterKind.NUMBER,
                    default=2.0,
                    description="Relative weight for title vs description",
                    min_value=0.5,
                    max_value=5.0,
                    step=0.1,
                ),
                "recencyHalfLifeHours": ParameterDef(
                    name="recencyHalfLifeHours",
                    kind=ParameterKind.NUMBER,
                    default=12,
                    description="Half-life in hours for recency weighting",
                    min_value=1,
                    max_value=72,
                ),
            },
        ),
    )
