from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from tradelab.contexts.backtest.domain.value_objects import (
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_LOOKBACK_YEARS,
    DEFAULT_SHARES_PER_TRADE,
)

from .scalar_env_overrides import (
    resolve_bool_override,
    resolve_positive_float_override,
    resolve_str_override,
)

_ENV_NAME_KEY = "TRADELAB_ENV"
_CONFIG_PATH_KEY = "TRADELAB_BACKTEST_CLIENT_CONFIG"
_API_BASE_URL_KEY = "TRADELAB_API_BASE_URL"
_API_TIMEOUT_SECONDS_KEY = "TRADELAB_API_TIMEOUT_SECONDS"
_USER_ID_KEY = "TRADELAB_USER_ID"
_INCLUDE_INACTIVE_KEY = "TRADELAB_INCLUDE_INACTIVE"
_ALLOWED_ENVS = ("dev", "prod", "test")

_TIMEOUT_SECONDS_DEFAULT = 10.0


@dataclass(frozen=True, slots=True)
class BacktestClientPathsConfig:
    """
    Endpoint paths of the execution service and strategy store.

    `{user_id}` and `{strategy_id}` placeholders are filled by the HTTP adapters.
    """

    run_backtest: str = "/backtest"
    strategies_catalog: str = "/backtest/strategies"
    user_strategies: str = "/strategies/users/{user_id}/strategies"
    public_strategies: str = "/strategies/strategies/public"
    custom_strategies: str = "/custom-strategies"
    save_from_backtest: str = "/strategies/users/{user_id}/strategies/from-backtest"
    update_user_strategy: str = "/strategies/strategies/{strategy_id}"

    def __post_init__(self) -> None:
        for name in (
            "run_backtest",
            "strategies_catalog",
            "user_strategies",
            "public_strategies",
            "custom_strategies",
            "save_from_backtest",
            "update_user_strategy",
        ):
            value = getattr(self, name).strip()
            if not value.startswith("/"):
                raise ValueError(f"backtest_client.api.paths.{name} must start with '/'")
            object.__setattr__(self, name, value)


@dataclass(frozen=True, slots=True)
class BacktestClientApiConfig:
    """
    HTTP settings loaded from `backtest_client.api` section.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - configs/dev/backtest_client.yaml
      - src/tradelab/contexts/backtest/adapters/outbound/http/
        httpx_backtest_execution_gateway.py
      - apps/cli/wiring/modules/backtest.py
    """

    base_url: str
    timeout_seconds: float = _TIMEOUT_SECONDS_DEFAULT
    paths: BacktestClientPathsConfig = field(default_factory=BacktestClientPathsConfig)

    def __post_init__(self) -> None:
        """
        Validate HTTP settings and normalize base URL.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Base URL is absolute; trailing slashes are removed.
        Raises:
            ValueError: If base URL is blank or timeout is non-positive.
        Side Effects:
            Replaces `base_url` with normalized value.
        """
        normalized_base_url = self.base_url.strip().rstrip("/")
        if not normalized_base_url:
            raise ValueError("backtest_client.api.base_url must be non-empty")
        if self.timeout_seconds <= 0.0:
            raise ValueError("backtest_client.api.timeout_seconds must be > 0")
        object.__setattr__(self, "base_url", normalized_base_url)


@dataclass(frozen=True, slots=True)
class BacktestFormDefaultsConfig:
    """
    Initial form values loaded from `backtest_client.form_defaults` section.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/domain/value_objects/backtest_form_fields.py
      - configs/dev/backtest_client.yaml
    """

    initial_capital: float = float(DEFAULT_INITIAL_CAPITAL)
    shares_per_trade: int = DEFAULT_SHARES_PER_TRADE
    lookback_years: int = DEFAULT_LOOKBACK_YEARS

    def __post_init__(self) -> None:
        if self.initial_capital <= 0.0:
            raise ValueError("backtest_client.form_defaults.initial_capital must be > 0")
        if self.shares_per_trade <= 0:
            raise ValueError("backtest_client.form_defaults.shares_per_trade must be > 0")
        if self.lookback_years <= 0:
            raise ValueError("backtest_client.form_defaults.lookback_years must be > 0")


@dataclass(frozen=True, slots=True)
class BacktestClientConfig:
    """
    Backtest client runtime config loaded from `configs/<env>/backtest_client.yaml`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - configs/dev/backtest_client.yaml
      - configs/test/backtest_client.yaml
      - configs/prod/backtest_client.yaml
    """

    version: int
    api: BacktestClientApiConfig
    form_defaults: BacktestFormDefaultsConfig = field(
        default_factory=BacktestFormDefaultsConfig
    )
    user_id: str | None = None
    include_inactive: bool = False

    def __post_init__(self) -> None:
        if self.version <= 0:
            raise ValueError("version must be > 0")
        if self.api is None:  # type: ignore[truthy-bool]
            raise ValueError("backtest_client.api section must be configured")
        if self.user_id is not None and not self.user_id.strip():
            raise ValueError("backtest_client.user_id must be non-empty when provided")


def resolve_backtest_client_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Resolve client config path using env override precedence contract.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - configs/dev/backtest_client.yaml
      - apps/cli/wiring/modules/backtest.py

    Args:
        environ: Runtime environment mapping.
    Returns:
        Path: Resolved `backtest_client.yaml` path.
    Assumptions:
        Precedence is `TRADELAB_BACKTEST_CLIENT_CONFIG` >
        `configs/<TRADELAB_ENV>/backtest_client.yaml`.
    Raises:
        ValueError: If `TRADELAB_ENV` value is unsupported.
    Side Effects:
        None.
    """
    override_path = environ.get(_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)

    env_name = _resolve_env_name(environ=environ)
    return Path("configs") / env_name / "backtest_client.yaml"


def load_backtest_client_config(
    path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> BacktestClientConfig:
    """
    Load and validate backtest client YAML configuration with scalar env overrides.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - configs/dev/backtest_client.yaml
      - src/tradelab/contexts/backtest/adapters/outbound/config/scalar_env_overrides.py
      - apps/cli/wiring/modules/backtest.py

    Args:
        path: Path to `backtest_client.yaml`.
        environ: Optional environment mapping with scalar overrides.
    Returns:
        BacktestClientConfig: Parsed validated config object.
    Assumptions:
        Missing non-required keys fallback to documented defaults.
        `TRADELAB_API_BASE_URL`, `TRADELAB_API_TIMEOUT_SECONDS`, `TRADELAB_USER_ID`
        and `TRADELAB_INCLUDE_INACTIVE` override YAML values when set.
    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If YAML shape, values or env overrides are invalid.
    Side Effects:
        Reads one UTF-8 YAML file from filesystem.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"backtest client config not found: {config_path}")

    payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError("backtest client config must be mapping at top-level")

    overrides: Mapping[str, str] = environ if environ is not None else {}

    version = _get_int(payload, "version", required=True)
    client_map = _get_mapping(payload, "backtest_client", required=True)
    api_map = _get_mapping(client_map, "api", required=True)
    paths_map = _get_mapping(api_map, "paths", required=False)
    form_defaults_map = _get_mapping(client_map, "form_defaults", required=False)

    defaults = BacktestClientPathsConfig()
    paths = BacktestClientPathsConfig(
        **{
            name: _get_str_with_default(paths_map, name, default=getattr(defaults, name))
            for name in (
                "run_backtest",
                "strategies_catalog",
                "user_strategies",
                "public_strategies",
                "custom_strategies",
                "save_from_backtest",
                "update_user_strategy",
            )
        }
    )
    api = BacktestClientApiConfig(
        base_url=resolve_str_override(
            environ=overrides,
            key=_API_BASE_URL_KEY,
            default=_get_str(api_map, "base_url", required=True),
        )
        or "",
        timeout_seconds=resolve_positive_float_override(
            environ=overrides,
            key=_API_TIMEOUT_SECONDS_KEY,
            default=_get_float_with_default(
                api_map,
                "timeout_seconds",
                default=_TIMEOUT_SECONDS_DEFAULT,
            ),
        ),
        paths=paths,
    )
    form_defaults = BacktestFormDefaultsConfig(
        initial_capital=_get_float_with_default(
            form_defaults_map,
            "initial_capital",
            default=float(DEFAULT_INITIAL_CAPITAL),
        ),
        shares_per_trade=_get_int_with_default(
            form_defaults_map,
            "shares_per_trade",
            default=DEFAULT_SHARES_PER_TRADE,
        ),
        lookback_years=_get_int_with_default(
            form_defaults_map,
            "lookback_years",
            default=DEFAULT_LOOKBACK_YEARS,
        ),
    )
    return BacktestClientConfig(
        version=version,
        api=api,
        form_defaults=form_defaults,
        user_id=resolve_str_override(
            environ=overrides,
            key=_USER_ID_KEY,
            default=_get_optional_scalar_str(client_map, "user_id"),
        ),
        include_inactive=resolve_bool_override(
            environ=overrides,
            key=_INCLUDE_INACTIVE_KEY,
            default=_get_bool(client_map, "include_inactive", required=False),
        ),
    )


def _resolve_env_name(*, environ: Mapping[str, str]) -> str:
    raw_env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if raw_env_name not in _ALLOWED_ENVS:
        raise ValueError(
            f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {raw_env_name!r}"
        )
    return raw_env_name


def _get_mapping(data: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """
    Read nested mapping from YAML payload.

    Args:
        data: Source mapping.
        key: Mapping key.
        required: Whether key is mandatory.
    Returns:
        Mapping[str, Any]: Nested mapping or empty mapping.
    Assumptions:
        Optional missing mapping sections are represented as empty mapping.
    Raises:
        ValueError: If required key missing or value is not mapping.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected mapping at key '{key}', got {type(value).__name__}")
    return value


def _get_bool(data: Mapping[str, Any], key: str, *, required: bool) -> bool:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return False
    if not isinstance(value, bool):
        raise ValueError(f"expected bool at key '{key}', got {type(value).__name__}")
    return value


def _get_int(data: Mapping[str, Any], key: str, *, required: bool) -> int:
    """
    Read integer value from payload while rejecting bools.

    Args:
        data: Source mapping.
        key: Integer key name.
        required: Whether key is mandatory.
    Returns:
        int: Parsed integer value.
    Assumptions:
        Bool values are rejected despite inheriting from `int`.
    Raises:
        ValueError: If missing required key or value type is invalid.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int at key '{key}', got {type(value).__name__}")
    return value


def _get_int_with_default(data: Mapping[str, Any], key: str, *, default: int) -> int:
    if key not in data:
        return default
    return _get_int(data, key, required=True)


def _get_str(data: Mapping[str, Any], key: str, *, required: bool) -> str:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return ""
    if not isinstance(value, str):
        raise ValueError(f"expected str at key '{key}', got {type(value).__name__}")
    return value


def _get_str_with_default(data: Mapping[str, Any], key: str, *, default: str) -> str:
    if key not in data:
        return default
    return _get_str(data, key, required=True)


def _get_optional_scalar_str(data: Mapping[str, Any], key: str) -> str | None:
    """
    Read optional identifier that YAML may parse as int or str.

    Args:
        data: Source mapping.
        key: Identifier key name.
    Returns:
        str | None: Identifier text or `None` when absent.
    Assumptions:
        Numeric user ids (`user_id: 42`) are kept as their decimal text.
    Raises:
        ValueError: If provided value is neither int nor str.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError(f"expected str at key '{key}', got {type(value).__name__}")
    return str(value)


def _get_float(data: Mapping[str, Any], key: str, *, required: bool) -> float:
    """
    Read float-compatible numeric value from payload while rejecting bools.

    Args:
        data: Source mapping.
        key: Numeric key name.
        required: Whether key is mandatory.
    Returns:
        float: Parsed floating-point value.
    Assumptions:
        Integer values are accepted and converted to float.
    Raises:
        ValueError: If required value is missing or type is invalid.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0.0
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"expected float at key '{key}', got {type(value).__name__}")
    return float(value)


def _get_float_with_default(data: Mapping[str, Any], key: str, *, default: float) -> float:
    if key not in data:
        return default
    return _get_float(data, key, required=True)
