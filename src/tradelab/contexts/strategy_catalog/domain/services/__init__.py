from .strategy_type_normalizer import (
    BOLLINGER_BANDS,
    BREAKOUT,
    CANONICAL_STRATEGY_TYPES,
    CUSTOM,
    MEAN_REVERSION,
    MOMENTUM,
    MOVING_AVERAGE_CROSSOVER,
    SENTIMENT_ANALYSIS,
    is_known_strategy_type,
    normalize_strategy_type,
    strategy_storage_type,
    strategy_type_label,
)

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
