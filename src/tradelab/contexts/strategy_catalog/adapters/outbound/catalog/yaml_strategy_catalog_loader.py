from __future__ import annotations

from pathlib import Path
from typing import Mapping

import yaml

from .catalog_payload import descriptors_from_payload
from .in_memory_parameter_schema_catalog import InMemoryParameterSchemaCatalog

_ENV_NAME_KEY = "TRADELAB_ENV"
_CONFIG_PATH_KEY = "TRADELAB_STRATEGIES_CONFIG"
_ALLOWED_ENVS = ("dev", "prod", "test")


class YamlStrategyCatalogLoader:
    """
    Loader building an in-memory strategy catalog from `strategies.yaml`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - configs/dev/strategies.yaml
      - src/tradelab/contexts/strategy_catalog/adapters/outbound/catalog/catalog_payload.py
      - apps/cli/wiring/modules/backtest.py
    """

    @classmethod
    def from_environ(cls, *, environ: Mapping[str, str]) -> InMemoryParameterSchemaCatalog:
        """
        Build catalog from environment-aware strategies YAML path resolution.

        Args:
            environ: Runtime environment mapping.
        Returns:
            InMemoryParameterSchemaCatalog: Loaded catalog.
        Assumptions:
            Path precedence is `TRADELAB_STRATEGIES_CONFIG`
            then `configs/<TRADELAB_ENV>/strategies.yaml`.
        Raises:
            FileNotFoundError: If resolved strategies YAML path does not exist.
            ValueError: If YAML payload shape is invalid.
        Side Effects:
            Reads strategies YAML file from filesystem.
        """
        return cls.from_yaml(config_path=resolve_strategies_config_path(environ=environ))

    @classmethod
    def from_yaml(cls, *, config_path: str | Path) -> InMemoryParameterSchemaCatalog:
        """
        Build catalog from one strategies YAML file path.

        Args:
            config_path: Path to strategies YAML file.
        Returns:
            InMemoryParameterSchemaCatalog: Loaded catalog.
        Assumptions:
            Top-level payload contains `strategies` list in catalog wire shape.
        Raises:
            FileNotFoundError: If config path does not exist.
            ValueError: If payload shape cannot be parsed.
        Side Effects:
            Reads one YAML file from disk.
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"strategies config not found: {path}")

        raw_payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(raw_payload, Mapping):
            raise ValueError("strategies config must be mapping at top-level")
        items = raw_payload.get("strategies")
        if not isinstance(items, list):
            raise ValueError("strategies config requires 'strategies' list")
        return InMemoryParameterSchemaCatalog(descriptors=descriptors_from_payload(items))


def resolve_strategies_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Resolve strategies YAML path using env override and env-name fallback.

    Args:
        environ: Runtime environment mapping.
    Returns:
        Path: Resolved config path.
    Assumptions:
        Missing `TRADELAB_ENV` defaults to `dev`.
    Raises:
        ValueError: If `TRADELAB_ENV` value is invalid.
    Side Effects:
        None.
    """
    override_path = environ.get(_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)

    env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if env_name not in _ALLOWED_ENVS:
        raise ValueError(f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {env_name!r}")
    return Path("configs") / env_name / "strategies.yaml"
