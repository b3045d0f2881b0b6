from .backtest_selection import BacktestSelection
from .strategy_commands import (
    SaveStrategyFromBacktestCommand,
    UserStrategyDraft,
    UserStrategyPatch,
)

__all__ = [
    "BacktestSelection",
    "SaveStrategyFromBacktestCommand",
    "UserStrategyDraft",
    "UserStrategyPatch",
]
