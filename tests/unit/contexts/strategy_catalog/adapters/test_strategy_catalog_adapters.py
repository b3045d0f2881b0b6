from __future__ import annotations

from pathlib import Path

import pytest

from tradelab.contexts.strategy_catalog.adapters.outbound.catalog import (
    InMemoryParameterSchemaCatalog,
    YamlStrategyCatalogLoader,
    descriptor_to_payload,
    descriptors_from_payload,
    resolve_strategies_config_path,
)
from tradelab.contexts.strategy_catalog.domain.entities import ParameterDef, ParameterKind
from tradelab.contexts.strategy_catalog.domain.errors import UnknownStrategyError

_REPO_ROOT = Path(__file__).resolve().parents[5]


def _write_strategies_config(tmp_path: Path, *, body: str) -> Path:
    """
    Write strategies YAML fixture into temporary directory.

    Args:
        tmp_path: pytest temporary directory fixture.
        body: YAML document content.
    Returns:
        Path: Written config path.
    Assumptions:
        File name mirrors runtime default `strategies.yaml`.
    Raises:
        OSError: If file cannot be written.
    Side Effects:
        Creates one file under `tmp_path`.
    """
    config_path = tmp_path / "strategies.yaml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


def test_in_memory_catalog_resolves_descriptors_by_any_spelling() -> None:
    """
    Verify built-in catalog lookup normalizes strategy identifiers.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Lookup key is the canonical identifier.
    Raises:
        AssertionError: If alias lookup fails.
    Side Effects:
        None.
    """
    catalog = InMemoryParameterSchemaCatalog.builtin()

    assert catalog.get_descriptor("moving_average").name == "movingAverageCrossover"
    assert set(catalog.get_schema("BollingerBands")) == {"window", "multiplier"}
    assert len(catalog.list_descriptors()) == 6


def test_in_memory_catalog_raises_unknown_strategy_error() -> None:
    catalog = InMemoryParameterSchemaCatalog.builtin()

    with pytest.raises(UnknownStrategyError) as error_info:
        catalog.get_descriptor("pairsTrading")

    assert error_info.value.strategy_name == "pairsTrading"


def test_in_memory_catalog_rejects_duplicate_canonical_names() -> None:
    items = [
        {"name": "meanReversion", "parameters": {}},
        {"name": "mean_reversion", "parameters": {}},
    ]

    with pytest.raises(ValueError, match="duplicate strategy"):
        InMemoryParameterSchemaCatalog(descriptors=descriptors_from_payload(items))


def test_descriptors_from_payload_parses_structured_and_scalar_entries() -> None:
    """
    Verify catalog wire payload maps `type/min/max` into domain definitions.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Bare scalar parameter values stay legacy schema entries.
    Raises:
        AssertionError: If parsed schema differs from payload.
    Side Effects:
        None.
    """
    descriptors = descriptors_from_payload(
        [
            {
                "name": "movingAverageCrossover",
                "displayName": "Moving Average Crossover",
                "category": "Trend Following",
                "parameters": {
                    "fastWindow": {"type": "number", "default": 10, "min": 5, "max": 50},
                    "maType": {"type": "select", "default": "SMA", "options": ["SMA", "EMA"]},
                    "legacyWindow": 15,
                },
            }
        ]
    )

    descriptor = descriptors[0]
    fast_window = descriptor.parameters["fastWindow"]
    assert isinstance(fast_window, ParameterDef)
    assert fast_window.kind is ParameterKind.NUMBER
    assert fast_window.default == 10
    assert fast_window.min_value == 5
    assert fast_window.max_value == 50
    ma_type = descriptor.parameters["maType"]
    assert isinstance(ma_type, ParameterDef)
    assert ma_type.options == ("SMA", "EMA")
    assert descriptor.parameters["legacyWindow"] == 15
    assert descriptor.label == "Moving Average Crossover"


def test_descriptors_from_payload_reports_invalid_item_index() -> None:
    with pytest.raises(ValueError, match=r"strategies\[1\]"):
        descriptors_from_payload([{"name": "momentum"}, {"parameters": {}}])


def test_descriptor_payload_round_trip_keeps_builtin_catalog() -> None:
    """
    Verify rendering built-in descriptors to wire shape and parsing back is lossless.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Wire shape is shared by the HTTP catalog and `strategies.yaml`.
    Raises:
        AssertionError: If any descriptor changes.
    Side Effects:
        None.
    """
    builtin = InMemoryParameterSchemaCatalog.builtin().list_descriptors()

    parsed = descriptors_from_payload([descriptor_to_payload(item) for item in builtin])

    assert parsed == builtin


def test_yaml_loader_builds_catalog_from_file(tmp_path: Path) -> None:
    config_path = _write_strategies_config(
        tmp_path,
        body="""
strategies:
  - name: mean_reversion
    displayName: Mean Reversion
    parameters:
      window:
        type: number
        default: 20
        min: 5
        max: 200
""",
    )

    catalog = YamlStrategyCatalogLoader.from_yaml(config_path=config_path)

    assert catalog.get_descriptor("meanReversion").name == "mean_reversion"
    assert set(catalog.get_schema("meanReversion")) == {"window"}


def test_yaml_loader_rejects_missing_strategies_list(tmp_path: Path) -> None:
    config_path = _write_strategies_config(tmp_path, body="version: 1\n")

    with pytest.raises(ValueError, match="'strategies' list"):
        YamlStrategyCatalogLoader.from_yaml(config_path=config_path)


def test_yaml_loader_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        YamlStrategyCatalogLoader.from_yaml(config_path=tmp_path / "absent.yaml")


@pytest.mark.parametrize("env_name", ["dev", "test", "prod"])
def test_shipped_strategies_config_matches_builtin_catalog(env_name: str) -> None:
    """
    Verify every shipped `strategies.yaml` mirrors built-in hard definitions.

    Args:
        env_name: Runtime environment directory name.
    Returns:
        None.
    Assumptions:
        Config files are edited together with `domain/definitions`.
    Raises:
        AssertionError: If YAML catalog drifted from built-in definitions.
    Side Effects:
        Reads repository config files.
    """
    config_path = _REPO_ROOT / "configs" / env_name / "strategies.yaml"

    catalog = YamlStrategyCatalogLoader.from_yaml(config_path=config_path)

    assert catalog.list_descriptors() == InMemoryParameterSchemaCatalog.builtin().list_descriptors()


def test_resolve_strategies_config_path_precedence() -> None:
    """
    Verify explicit path override wins over env-name fallback.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Missing `TRADELAB_ENV` defaults to `dev`.
    Raises:
        AssertionError: If resolved paths differ.
    Side Effects:
        None.
    """
    assert resolve_strategies_config_path(environ={}) == Path("configs/dev/strategies.yaml")
    assert resolve_strategies_config_path(environ={"TRADELAB_ENV": "prod"}) == Path(
        "configs/prod/strategies.yaml"
    )
    assert resolve_strategies_config_path(
        environ={"TRADELAB_ENV": "prod", "TRADELAB_STRATEGIES_CONFIG": "/tmp/custom.yaml"}
    ) == Path("/tmp/custom.yaml")
    with pytest.raises(ValueError, match="TRADELAB_ENV"):
        resolve_strategies_config_path(environ={"TRADELAB_ENV": "staging"})
