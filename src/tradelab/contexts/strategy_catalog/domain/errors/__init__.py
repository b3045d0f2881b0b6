from .unknown_strategy_error import UnknownStrategyError

__all__ = ["UnknownStrategyError"]
