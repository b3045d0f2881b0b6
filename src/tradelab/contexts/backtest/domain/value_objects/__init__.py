from .backtest_form_fields import (
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_LOOKBACK_YEARS,
    DEFAULT_SHARES_PER_TRADE,
    BacktestFormFields,
    FormDate,
)
from .strategy_parameters import (
    ENVELOPE_KEYS,
    BollingerBandsParameters,
    BreakoutParameters,
    CustomConditionsParameters,
    MeanReversionParameters,
    MomentumParameters,
    MovingAverageCrossoverParameters,
    PassthroughParameters,
    SentimentAnalysisParameters,
    StrategyParameters,
    coerce_parameter_value,
    parameter_type_for,
    parameters_for,
)

__all__ = [
    "DEFAULT_INITIAL_CAPITAL",
    "DEFAULT_LOOKBACK_YEARS",
    "DEFAULT_SHARES_PER_TRADE",
    "ENVELOPE_KEYS",
    "BacktestFormFields",
    "BollingerBandsParameters",
    "BreakoutParameters",
    "CustomConditionsParameters",
    "FormDate",
    "MeanReversionParameters",
    "MomentumParameters",
    "MovingAverageCrossoverParameters",
    "PassthroughParameters",
    "SentimentAnalysisParameters",
    "StrategyParameters",
    "coerce_parameter_value",
    "parameter_type_for",
    "parameters_for",
]
