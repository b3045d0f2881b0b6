"""
Typed per-strategy parameter records for outbound backtest requests.

Each canonical strategy identifier owns one frozen record whose fields declare the wire
name, accepted legacy aliases and value kind of every tunable parameter. Records emit
only the fields that were supplied, so a request built from `{window: 20}` carries
exactly `window: 20`.

Docs:
  - docs/architecture/backtest/backtest-request-construction-v1.md
Related:
  - src/tradelab/contexts/backtest/domain/entities/backtest_request.py
  - src/tradelab/contexts/strategy_catalog/domain/definitions/__init__.py
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Mapping

from tradelab.contexts.backtest.domain.errors import BacktestPreconditionError
from tradelab.contexts.strategy_catalog.domain.services import (
    BOLLINGER_BANDS,
    BREAKOUT,
    CUSTOM,
    MEAN_REVERSION,
    MOMENTUM,
    MOVING_AVERAGE_CROSSOVER,
    SENTIMENT_ANALYSIS,
)

log = logging.getLogger(__name__)

ParameterValueKind = Literal["int", "float", "str", "bool"]

ENVELOPE_KEYS: frozenset[str] = frozenset(
    {
        "strategy",
        "symbols",
        "startDate",
        "endDate",
        "initialCapital",
        "sharesPerTrade",
        "customStrategy",
    }
)

_EXPECTED_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "int": "an integer",
        "float": "a number",
        "str": "a string",
        "bool": "a boolean",
    }
)


def _param(wire_name: str, kind: ParameterValueKind, *aliases: str) -> Any:
    return field(
        default=None,
        metadata={"wire": wire_name, "kind": kind, "aliases": tuple(aliases)},
    )


def coerce_parameter_value(value: Any, *, kind: ParameterValueKind, path: str) -> Any:
    """
    Check one parameter value against its declared kind.

    Args:
        value: Raw parameter value.
        kind: Declared value kind.
        path: Wire parameter name used in diagnostics.
    Returns:
        Any: Value unchanged, except integral floats narrowed to `int` for `int` kind.
    Assumptions:
        Bool is never accepted as a number. Range bounds are not enforced here.
    Raises:
        BacktestPreconditionError: `InvalidStrategyParameter` on kind mismatch.
    Side Effects:
        None.
    """
    if kind == "bool":
        if isinstance(value, bool):
            return value
    elif kind == "str":
        if isinstance(value, str):
            return value
    elif not isinstance(value, bool):
        if kind == "int":
            if isinstance(value, int):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
        elif isinstance(value, (int, float)):
            return value

    raise BacktestPreconditionError(
        "InvalidStrategyParameter",
        message=f"Parameter '{path}' must be {_EXPECTED_LABELS[kind]}",
        details={"path": path, "expected": kind, "actual": type(value).__name__},
    )


@dataclass(frozen=True, slots=True)
class StrategyParameters:
    """
    Base of typed strategy parameter records.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
    """

    strategy: ClassVar[str] = ""
    ignored_keys: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> StrategyParameters:
        """
        Build typed record from a loose parameter mapping.

        Args:
            values: Parameter mapping from defaults, a saved config or user edits.
        Returns:
            StrategyParameters: Record holding only supplied, declared parameters.
        Assumptions:
            Envelope keys and `None` values are skipped; canonical wire names win over
            legacy aliases; undeclared keys are dropped with a warning.
        Raises:
            BacktestPreconditionError: `InvalidStrategyParameter` on value kind mismatch.
        Side Effects:
            Emits warning log records for dropped parameters.
        """
        canonical_targets: dict[str, Any] = {}
        alias_targets: dict[str, Any] = {}
        for record_field in fields(cls):
            canonical_targets[record_field.metadata["wire"]] = record_field
            for alias in record_field.metadata["aliases"]:
                alias_targets[alias] = record_field

        resolved: dict[str, Any] = {}
        from_alias: set[str] = set()
        for key, value in values.items():
            if key in ENVELOPE_KEYS or key in cls.ignored_keys:
                continue
            target = canonical_targets.get(key)
            is_alias = False
            if target is None:
                target = alias_targets.get(key)
                is_alias = target is not None
            if target is None:
                log.warning("dropping undeclared parameter %r for strategy %s", key, cls.strategy)
                continue
            if value is None:
                continue
            if is_alias and target.name in resolved and target.name not in from_alias:
                continue
            resolved[target.name] = coerce_parameter_value(
                value,
                kind=target.metadata["kind"],
                path=key,
            )
            if is_alias:
                from_alias.add(target.name)
            else:
                from_alias.discard(target.name)
        return cls(**resolved)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for record_field in fields(self):
            value = getattr(self, record_field.name)
            if value is not None:
                payload[record_field.metadata["wire"]] = value
        return payload

    @classmethod
    def wire_names(cls) -> tuple[str, ...]:
        return tuple(record_field.metadata["wire"] for record_field in fields(cls))


@dataclass(frozen=True, slots=True)
class MeanReversionParameters(StrategyParameters):
    strategy: ClassVar[str] = MEAN_REVERSION

    window: int | None = _param("window", "int")
    threshold: float | None = _param("threshold", "float")


@dataclass(frozen=True, slots=True)
class MovingAverageCrossoverParameters(StrategyParameters):
    """
    Crossover windows sent as `fastWindow`/`slowWindow`.

    Saved configs written with `shortWindow`/`longWindow` are accepted, but the body
    always carries the `fastWindow`/`slowWindow` keys; the legacy keys are never echoed.
    """

    strategy: ClassVar[str] = MOVING_AVERAGE_CROSSOVER

    fast_window: int | None = _param("fastWindow", "int", "shortWindow")
    slow_window: int | None = _param("slowWindow", "int", "longWindow")
    ma_type: str | None = _param("maType", "str")


@dataclass(frozen=True, slots=True)
class MomentumParameters(StrategyParameters):
    strategy: ClassVar[str] = MOMENTUM

    rsi_window: int | None = _param("rsiWindow", "int")
    rsi_overbought: float | None = _param("rsiOverbought", "float")
    rsi_oversold: float | None = _param("rsiOversold", "float")
    momentum_window: int | None = _param("momentumWindow", "int", "window")
    momentum_threshold: float | None = _param("momentumThreshold", "float", "threshold")


@dataclass(frozen=True, slots=True)
class BollingerBandsParameters(StrategyParameters):
    strategy: ClassVar[str] = BOLLINGER_BANDS

    window: int | None = _param("window", "int")
    multiplier: float | None = _param("multiplier", "float", "numStdDev")


@dataclass(frozen=True, slots=True)
class BreakoutParameters(StrategyParameters):
    strategy: ClassVar[str] = BREAKOUT

    lookback_window: int | None = _param("lookbackWindow", "int", "window")
    breakout_threshold: float | None = _param("breakoutThreshold", "float", "threshold")
    min_volume_ratio: float | None = _param("minVolumeRatio", "float")
    confirmation_period: int | None = _param("confirmationPeriod", "int")


@dataclass(frozen=True, slots=True)
class SentimentAnalysisParameters(StrategyParameters):
    strategy: ClassVar[str] = SENTIMENT_ANALYSIS

    lookback_days: int | None = _param("lookbackDays", "int")
    poll_interval_minutes: int | None = _param("pollIntervalMinutes", "int")
    min_articles: int | None = _param("minArticles", "int")
    buy_threshold: float | None = _param("buyThreshold", "float")
    sell_threshold: float | None = _param("sellThreshold", "float")
    title_weight: float | None = _param("titleWeight", "float")
    recency_half_life_hours: int | None = _param("recencyHalfLifeHours", "int")


@dataclass(frozen=True, slots=True)
class CustomConditionsParameters(StrategyParameters):
    """
    Custom strategies carry no top-level parameter fields.

    Condition trees travel only inside the `customStrategy` request block.
    """

    strategy: ClassVar[str] = CUSTOM
    ignored_keys: ClassVar[frozenset[str]] = frozenset({"buy_conditions", "sell_conditions"})


@dataclass(frozen=True, slots=True)
class PassthroughParameters(StrategyParameters):
    """
    Untyped parameters of a strategy identifier this client does not know yet.

    Values are forwarded as-is, minus envelope keys.
    """

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> PassthroughParameters:
        return cls(
            values={key: value for key, value in values.items() if key not in ENVELOPE_KEYS}
        )

    def to_payload(self) -> dict[str, Any]:
        return dict(self.values)

    @classmethod
    def wire_names(cls) -> tuple[str, ...]:
        return ()


_PARAMETER_TYPES: Mapping[str, type[StrategyParameters]] = MappingProxyType(
    {
        record_type.strategy: record_type
        for record_type in (
            MeanReversionParameters,
            MovingAverageCrossoverParameters,
            MomentumParameters,
            BollingerBandsParameters,
            BreakoutParameters,
            SentimentAnalysisParameters,
            CustomConditionsParameters,
        )
    }
)


def parameter_type_for(strategy: str) -> type[StrategyParameters] | None:
    return _PARAMETER_TYPES.get(strategy)


def parameters_for(strategy: str, values: Mapping[str, Any]) -> StrategyParameters:
    """
    Build the typed parameter record of one canonical strategy identifier.

    Args:
        strategy: Canonical strategy identifier (already normalized).
        values: Loose parameter mapping.
    Returns:
        StrategyParameters: Typed record, or `PassthroughParameters` for unknown ids.
    Assumptions:
        Unknown identifiers are forwarded so the execution service can evolve first.
    Raises:
        BacktestPreconditionError: `InvalidStrategyParameter` on value kind mismatch.
    Side Effects:
        None.
    """
    record_type = _PARAMETER_TYPES.get(strategy)
    if record_type is None:
        log.debug("no typed parameter record for strategy %r, forwarding as-is", strategy)
        return PassthroughParameters.from_mapping(values)
    return record_type.from_mapping(values)
