from __future__ import annotations

from enum import Enum


class ParameterKind(str, Enum):
    """
    Supported strategy parameter kinds exposed by the strategy catalog.

    Docs: docs/architecture/backtest/backtest-request-construction-v1.md
    Related: .parameter_def, ..definitions
    """

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    SELECT = "select"
