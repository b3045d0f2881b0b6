"""
Canonical strategy identifier mapping.

Stored records, legacy selectors and the catalog spell strategy families differently
(`mean_reversion`, `MeanReversion`, `movingAverage`, ...). Every outbound request uses the
canonical camelCase identifier produced here; unknown identifiers pass through unchanged.

Docs: docs/architecture/backtest/backtest-request-construction-v1.md
Related: ...application.services.parameter_defaults_resolver,
  tradelab.contexts.backtest.application.services.backtest_request_builder
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

MEAN_REVERSION = "meanReversion"
MOVING_AVERAGE_CROSSOVER = "movingAverageCrossover"
MOMENTUM = "momentum"
BOLLINGER_BANDS = "bollingerBands"
BREAKOUT = "breakout"
SENTIMENT_ANALYSIS = "sentimentAnalysis"
CUSTOM = "custom"

CANONICAL_STRATEGY_TYPES: tuple[str, ...] = (
    MEAN_REVERSION,
    MOVING_AVERAGE_CROSSOVER,
    MOMENTUM,
    BOLLINGER_BANDS,
    BREAKOUT,
    SENTIMENT_ANALYSIS,
    CUSTOM,
)

_FOLDED_SEPARATORS = str.maketrans("", "", "_- ")


def _fold(raw_name: str) -> str:
    return raw_name.strip().lower().translate(_FOLDED_SEPARATORS)


def _build_alias_table() -> Mapping[str, str]:
    aliases: dict[str, str] = {_fold(name): name for name in CANONICAL_STRATEGY_TYPES}
    # legacy selector spelling without the "Crossover" suffix
    aliases[_fold("movingAverage")] = MOVING_AVERAGE_CROSSOVER
    return MappingProxyType(aliases)


_ALIASES = _build_alias_table()

_LABELS: Mapping[str, str] = MappingProxyType(
    {
        MEAN_REVERSION: "Mean Reversion",
        MOVING_AVERAGE_CROSSOVER: "Moving Average Crossover",
        MOMENTUM: "Momentum",
        BOLLINGER_BANDS: "Bollinger Bands",
        BREAKOUT: "Breakout",
        SENTIMENT_ANALYSIS: "Sentiment Analysis",
        CUSTOM: "Custom Strategy",
    }
)

_STORAGE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        MEAN_REVERSION: "mean_reversion",
        MOVING_AVERAGE_CROSSOVER: "moving_average_crossover",
        MOMENTUM: "momentum",
        BOLLINGER_BANDS: "bollinger_bands",
        BREAKOUT: "breakout",
        SENTIMENT_ANALYSIS: "sentiment_analysis",
        CUSTOM: "custom",
    }
)


def normalize_strategy_type(raw_name: str) -> str:
    """
    Map any known spelling of a strategy family to its canonical identifier.

    Args:
        raw_name: Strategy identifier in camelCase, PascalCase, snake_case or kebab-case.
    Returns:
        str: Canonical identifier, or `raw_name` unchanged when the family is unknown.
    Assumptions:
        Lookup ignores case, underscores, hyphens and spaces.
    Raises:
        None.
    Side Effects:
        None.
    """
    return _ALIASES.get(_fold(raw_name), raw_name)


def is_known_strategy_type(raw_name: str) -> bool:
    return _fold(raw_name) in _ALIASES


def strategy_type_label(raw_name: str) -> str:
    """Human-readable family label; unknown identifiers are returned unchanged."""
    return _LABELS.get(normalize_strategy_type(raw_name), raw_name)


def strategy_storage_type(raw_name: str) -> str:
    """
    Return the snake_case identifier persisted by the user strategy store.

    Args:
        raw_name: Strategy identifier in any supported spelling.
    Returns:
        str: Storage identifier such as `moving_average_crossover`; unknown names pass through.
    Assumptions:
        Store records are read back through `normalize_strategy_type`.
    Raises:
        None.
    Side Effects:
        None.
    """
    return _STORAGE_TYPES.get(normalize_strategy_type(raw_name), raw_name)


__all__ = [
    "BOLLINGER_BANDS",
    "BREAKOUT",
    "CANONICAL_STRATEGY_TYPES",
    "CUSTOM",
    "MEAN_REVERSION",
    "MOMENTUM",
    "MOVING_AVERAGE_CROSSOVER",
    "SENTIMENT_ANALYSIS",
    "is_known_strategy_type",
    "normalize_strategy_type",
    "strategy_storage_type",
    "strategy_type_label",
]
