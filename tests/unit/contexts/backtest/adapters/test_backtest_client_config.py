from __future__ import annotations

from pathlib import Path

import pytest

from tradelab.contexts.backtest.adapters.outbound.config import (
    load_backtest_client_config,
    parse_bool_literal,
    resolve_backtest_client_config_path,
    resolve_bool_override,
    resolve_positive_float_override,
    resolve_str_override,
)

_REPO_ROOT = Path(__file__).resolve().parents[5]


def _write_backtest_client_config(tmp_path: Path, *, body: str) -> Path:
    """
    Write backtest client YAML fixture into temporary directory.

    Args:
        tmp_path: pytest temporary directory fixture.
        body: YAML document content.
    Returns:
        Path: Written config path.
    Assumptions:
        File name mirrors runtime default `backtest_client.yaml`.
    Raises:
        OSError: If file cannot be written.
    Side Effects:
        Creates one file under `tmp_path`.
    """
    config_path = tmp_path / "backtest_client.yaml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


def test_load_backtest_client_config_applies_defaults_for_optional_sections(
    tmp_path: Path,
) -> None:
    """
    Verify minimal config falls back to documented paths and form defaults.

    Args:
        tmp_path: pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        Only `version` and `backtest_client.api.base_url` are required.
    Raises:
        AssertionError: If defaults differ.
    Side Effects:
        None.
    """
    config_path = _write_backtest_client_config(
        tmp_path,
        body="""
version: 1
backtest_client:
  api:
    base_url: "http://api.local/api/"
""",
    )

    config = load_backtest_client_config(config_path)

    assert config.version == 1
    assert config.api.base_url == "http://api.local/api"
    assert config.api.timeout_seconds == 10.0
    assert config.api.paths.run_backtest == "/backtest"
    assert config.api.paths.save_from_backtest == (
        "/strategies/users/{user_id}/strategies/from-backtest"
    )
    assert config.form_defaults.initial_capital == 10000.0
    assert config.form_defaults.shares_per_trade == 100
    assert config.form_defaults.lookback_years == 1
    assert config.user_id is None
    assert config.include_inactive is False


def test_load_backtest_client_config_reads_numeric_user_id_and_paths(tmp_path: Path) -> None:
    config_path = _write_backtest_client_config(
        tmp_path,
        body="""
version: 2
backtest_client:
  user_id: 42
  include_inactive: true
  api:
    base_url: "http://api.local"
    timeout_seconds: 3
    paths:
      run_backtest: /backtest/run
  form_defaults:
    initial_capital: 2500.5
    shares_per_trade: 10
    lookback_years: 3
""",
    )

    config = load_backtest_client_config(config_path)

    assert config.user_id == "42"
    assert config.include_inactive is True
    assert config.api.timeout_seconds == 3.0
    assert config.api.paths.run_backtest == "/backtest/run"
    assert config.api.paths.strategies_catalog == "/backtest/strategies"
    assert config.form_defaults.initial_capital == 2500.5
    assert config.form_defaults.lookback_years == 3


def test_env_overrides_win_over_yaml_values(tmp_path: Path) -> None:
    """
    Verify scalar env overrides replace YAML values.

    Args:
        tmp_path: pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        Blank env values are treated as not set.
    Raises:
        AssertionError: If override precedence differs.
    Side Effects:
        None.
    """
    config_path = _write_backtest_client_config(
        tmp_path,
        body="""
version: 1
backtest_client:
  user_id: "7"
  api:
    base_url: "http://api.local"
    timeout_seconds: 5
""",
    )

    config = load_backtest_client_config(
        config_path,
        environ={
            "TRADELAB_API_BASE_URL": "https://api.example/api/",
            "TRADELAB_API_TIMEOUT_SECONDS": "12.5",
            "TRADELAB_USER_ID": "99",
            "TRADELAB_INCLUDE_INACTIVE": "yes",
        },
    )
    blank = load_backtest_client_config(config_path, environ={"TRADELAB_USER_ID": "  "})

    assert config.api.base_url == "https://api.example/api"
    assert config.api.timeout_seconds == 12.5
    assert config.user_id == "99"
    assert config.include_inactive is True
    assert blank.user_id == "7"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("backtest_client:\n  api:\n    base_url: http://x\n", "version"),
        ("version: 1\n", "backtest_client"),
        ("version: 1\nbacktest_client:\n  api: {}\n", "base_url"),
        ("version: 1\nbacktest_client:\n  api:\n    base_url: ' '\n", "base_url"),
        (
            "version: 1\nbacktest_client:\n  api:\n    base_url: http://x\n"
            "    timeout_seconds: 0\n",
            "timeout_seconds",
        ),
        (
            "version: 1\nbacktest_client:\n  api:\n    base_url: http://x\n"
            "    paths:\n      run_backtest: backtest\n",
            "run_backtest",
        ),
        (
            "version: 1\nbacktest_client:\n  include_inactive: 'yes'\n"
            "  api:\n    base_url: http://x\n",
            "include_inactive",
        ),
        (
            "version: 1\nbacktest_client:\n  api:\n    base_url: http://x\n"
            "  form_defaults:\n    shares_per_trade: 0\n",
            "shares_per_trade",
        ),
        ("- just\n- a list\n", "mapping"),
    ],
)
def test_load_backtest_client_config_rejects_invalid_payloads(
    tmp_path: Path,
    body: str,
    message: str,
) -> None:
    config_path = _write_backtest_client_config(tmp_path, body=body)

    with pytest.raises(ValueError, match=message):
        load_backtest_client_config(config_path)


def test_load_backtest_client_config_rejects_invalid_env_override(tmp_path: Path) -> None:
    config_path = _write_backtest_client_config(
        tmp_path,
        body="version: 1\nbacktest_client:\n  api:\n    base_url: http://x\n",
    )

    with pytest.raises(ValueError, match="TRADELAB_API_TIMEOUT_SECONDS"):
        load_backtest_client_config(
            config_path,
            environ={"TRADELAB_API_TIMEOUT_SECONDS": "-1"},
        )


def test_load_backtest_client_config_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="backtest client config not found"):
        load_backtest_client_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize("env_name", ["dev", "test", "prod"])
def test_shipped_backtest_client_configs_are_valid(env_name: str) -> None:
    config = load_backtest_client_config(
        _REPO_ROOT / "configs" / env_name / "backtest_client.yaml",
        environ={},
    )

    assert config.api.base_url.startswith("http")
    assert config.api.paths.run_backtest == "/backtest"


def test_resolve_backtest_client_config_path_precedence() -> None:
    assert resolve_backtest_client_config_path(environ={}) == Path(
        "configs/dev/backtest_client.yaml"
    )
    assert resolve_backtest_client_config_path(environ={"TRADELAB_ENV": "Test"}) == Path(
        "configs/test/backtest_client.yaml"
    )
    assert resolve_backtest_client_config_path(
        environ={"TRADELAB_BACKTEST_CLIENT_CONFIG": "/etc/tradelab/client.yaml"}
    ) == Path("/etc/tradelab/client.yaml")
    with pytest.raises(ValueError, match="TRADELAB_ENV"):
        resolve_backtest_client_config_path(environ={"TRADELAB_ENV": "qa"})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), (" TRUE ", True), ("on", True), ("0", False), ("No", False), ("off", False)],
)
def test_parse_bool_literal_accepts_strict_literals(raw: str, expected: bool) -> None:
    assert parse_bool_literal(raw_value=raw, key="FLAG") is expected


@pytest.mark.parametrize("raw", ["maybe", "enabled", "2", ""])
def test_parse_bool_literal_names_the_variable_on_unknown_spelling(raw: str) -> None:
    with pytest.raises(ValueError, match=r"^TRADELAB_INCLUDE_INACTIVE: cannot read"):
        parse_bool_literal(raw_value=raw, key="TRADELAB_INCLUDE_INACTIVE")


def test_scalar_override_helpers_fall_back_to_defaults() -> None:
    """
    Verify missing or blank env values keep defaults and invalid literals fail.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Env mapping values are raw strings.
    Raises:
        AssertionError: If fallback or validation differs.
    Side Effects:
        None.
    """
    environ = {"BLANK": " ", "FLAG": "maybe", "TIMEOUT": "inf", "NAME": " api "}

    assert resolve_bool_override(environ=environ, key="MISSING", default=True) is True
    assert resolve_bool_override(environ=environ, key="BLANK", default=False) is False
    assert resolve_positive_float_override(environ=environ, key="BLANK", default=2.0) == 2.0
    assert resolve_str_override(environ=environ, key="NAME", default=None) == "api"
    assert resolve_str_override(environ=environ, key="MISSING", default=None) is None
    with pytest.raises(ValueError, match="FLAG"):
        resolve_bool_override(environ=environ, key="FLAG", default=False)
    with pytest.raises(ValueError, match="TIMEOUT"):
        resolve_positive_float_override(environ=environ, key="TIMEOUT", default=1.0)
