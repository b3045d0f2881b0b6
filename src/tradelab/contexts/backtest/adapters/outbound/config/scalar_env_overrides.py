from __future__ import annotations

import math
from typing import Mapping

_TRUE_LITERALS = frozenset({"1", "true", "yes", "on"})
_FALSE_LITERALS = frozenset({"0", "false", "no", "off"})


def parse_bool_literal(*, raw_value: str, key: str) -> bool:
    """
    Read a `TRADELAB_*` switch such as `TRADELAB_INCLUDE_INACTIVE` as a boolean.

    Related:
      - src/tradelab/contexts/backtest/adapters/outbound/config/backtest_client_config.py

    Args:
        raw_value: Value taken from the process environment.
        key: Variable name, echoed in the error so a bad deployment names its culprit.
    Returns:
        bool: Switch state.
    Assumptions:
        Case and surrounding whitespace are ignored; `1/yes/on/true` enable the switch
        and `0/no/off/false` disable it.
    Raises:
        ValueError: For any other spelling, e.g. `maybe` or `enabled`.
    Side Effects:
        None.
    """
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_LITERALS:
        return True
    if normalized in _FALSE_LITERALS:
        return False
    raise ValueError(f"{key}: cannot read {raw_value!r} as on/off (use 1/0, yes/no, on/off)")


def resolve_bool_override(
    *,
    environ: Mapping[str, str],
    key: str,
    default: bool,
) -> bool:
    """Environment switch wins over the YAML flag; unset or blank keeps the YAML value."""
    raw_override = environ.get(key, "").strip()
    if not raw_override:
        return default
    return parse_bool_literal(raw_value=raw_override, key=key)


def resolve_positive_float_override(
    *,
    environ: Mapping[str, str],
    key: str,
    default: float,
) -> float:
    """
    Override a positive client setting such as `TRADELAB_API_TIMEOUT_SECONDS`.

    Args:
        environ: Process environment.
        key: Variable name.
        default: Value from `backtest_client.yaml`.
    Returns:
        float: Override when set, otherwise `default`.
    Assumptions:
        `inf`, `nan`, zero and negatives never make a usable timeout.
    Raises:
        ValueError: If the override is not a finite number above zero.
    Side Effects:
        None.
    """
    raw_override = environ.get(key, "").strip()
    if not raw_override:
        return default
    try:
        parsed = float(raw_override)
    except ValueError as error:
        raise ValueError(f"{key} must be float, got {raw_override!r}") from error
    if not math.isfinite(parsed) or parsed <= 0.0:
        raise ValueError(f"{key} must be finite and > 0, got {raw_override!r}")
    return parsed


def resolve_str_override(
    *,
    environ: Mapping[str, str],
    key: str,
    default: str | None,
) -> str | None:
    raw_override = environ.get(key, "").strip()
    if not raw_override:
        return default
    return raw_override


__all__ = [
    "parse_bool_literal",
    "resolve_bool_override",
    "resolve_positive_float_override",
    "resolve_str_override",
]
