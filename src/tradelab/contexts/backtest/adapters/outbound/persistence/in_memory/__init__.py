from .strategy_store import InMemoryStrategyStore

__all__ = ["InMemoryStrategyStore"]
