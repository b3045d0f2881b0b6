from .backtest_client_config import (
    BacktestClientApiConfig,
    BacktestClientConfig,
    BacktestClientPathsConfig,
    BacktestFormDefaultsConfig,
    load_backtest_client_config,
    resolve_backtest_client_config_path,
)
from .scalar_env_overrides import (
    parse_bool_literal,
    resolve_bool_override,
    resolve_positive_float_override,
    resolve_str_override,
)

__all__ = [
    "BacktestClientApiConfig",
    "BacktestClientConfig",
    "BacktestClientPathsConfig",
    "BacktestFormDefaultsConfig",
    "load_backtest_client_config",
    "parse_bool_literal",
    "resolve_backtest_client_config_path",
    "resolve_bool_override",
    "resolve_positive_float_override",
    "resolve_str_override",
]
