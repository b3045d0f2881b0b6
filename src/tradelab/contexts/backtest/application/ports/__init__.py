from .backtest_execution_gateway import BacktestExecutionGateway
from .backtest_result_listener import BacktestResultListener
from .strategy_store import StrategyStore

__all__ = [
    "BacktestExecutionGateway",
    "BacktestResultListener",
    "StrategyStore",
]
