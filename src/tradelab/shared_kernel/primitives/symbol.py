from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Symbol:
    """
    Symbol — ticker of a tradable instrument (for example "AAPL").

    Rules:
    - normalization: strip + upper
    - invariant: non-empty after normalization
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"Symbol must be a string, got {type(self.value).__name__}")
        normalized = self.value.strip().upper()
        object.__setattr__(self, "value", normalized)

        if not normalized:
            raise ValueError("Symbol must be non-empty after normalization")

    def __str__(self) -> str:
        return self.value
