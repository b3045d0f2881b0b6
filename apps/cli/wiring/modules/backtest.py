from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Literal, Mapping, Sequence

import httpx

from tradelab.contexts.backtest.adapters.outbound.config import (
    BacktestClientConfig,
    load_backtest_client_config,
    resolve_backtest_client_config_path,
)
from tradelab.contexts.backtest.adapters.outbound.http import (
    HttpxBacktestExecutionGateway,
    HttpxStrategyStore,
)
from tradelab.contexts.backtest.application.ports import BacktestResultListener
from tradelab.contexts.backtest.application.services import (
    SessionStateCoordinator,
    UnifiedStrategyAdapter,
)
from tradelab.contexts.backtest.domain.value_objects import BacktestFormFields
from tradelab.contexts.strategy_catalog.adapters.outbound.catalog import (
    InMemoryParameterSchemaCatalog,
    YamlStrategyCatalogLoader,
)
from tradelab.contexts.strategy_catalog.adapters.outbound.http import (
    HttpxStrategyCatalogClient,
)
from tradelab.contexts.strategy_catalog.application.services import ParameterDefaultsResolver

CatalogSource = Literal["builtin", "yaml", "remote"]
CATALOG_SOURCES: tuple[CatalogSource, ...] = ("builtin", "yaml", "remote")


@dataclass(frozen=True, slots=True)
class BacktestClientWiring:
    """
    Composition root for backtest CLI commands.

    Env is the source of truth; `config_path` overrides path resolution.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - apps/cli/commands/run_backtest.py
      - apps/cli/commands/list_strategies.py
      - src/tradelab/contexts/backtest/adapters/outbound/config/backtest_client_config.py
    """

    environ: Mapping[str, str]
    config_path: str | None = None
    catalog_source: CatalogSource = "yaml"
    transport: httpx.BaseTransport | None = None

    def config(self) -> BacktestClientConfig:
        path = (
            Path(self.config_path)
            if self.config_path
            else resolve_backtest_client_config_path(environ=self.environ)
        )
        return load_backtest_client_config(path, environ=self.environ)

    def catalog(self, *, config: BacktestClientConfig) -> InMemoryParameterSchemaCatalog:
        """
        Build the parameter schema catalog from the configured source.

        Args:
            config: Loaded client config.
        Returns:
            InMemoryParameterSchemaCatalog: Ready catalog.
        Assumptions:
            `yaml` reads `TRADELAB_STRATEGIES_CONFIG` or `configs/<env>/strategies.yaml`.
        Raises:
            FileNotFoundError: If the YAML catalog is missing.
            ValueError: If the catalog payload is invalid.
            StrategyCatalogUnavailableError: If the remote catalog cannot be fetched.
        Side Effects:
            May read a YAML file or perform one HTTP request.
        """
        if self.catalog_source == "builtin":
            return InMemoryParameterSchemaCatalog.builtin()
        if self.catalog_source == "yaml":
            return YamlStrategyCatalogLoader.from_environ(environ=self.environ)
        return HttpxStrategyCatalogClient(
            api_base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
            path=config.api.paths.strategies_catalog,
            transport=self.transport,
        ).fetch_catalog()

    def gateway(self, *, config: BacktestClientConfig) -> HttpxBacktestExecutionGateway:
        return HttpxBacktestExecutionGateway(
            api_base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
            path=config.api.paths.run_backtest,
            transport=self.transport,
        )

    def store(self, *, config: BacktestClientConfig) -> HttpxStrategyStore:
        paths = config.api.paths
        return HttpxStrategyStore(
            api_base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
            paths={
                "user_strategies": paths.user_strategies,
                "public_strategies": paths.public_strategies,
                "custom_strategies": paths.custom_strategies,
                "save_from_backtest": paths.save_from_backtest,
                "update_user_strategy": paths.update_user_strategy,
            },
            transport=self.transport,
        )

    def adapter(self, *, catalog: InMemoryParameterSchemaCatalog) -> UnifiedStrategyAdapter:
        return UnifiedStrategyAdapter(
            defaults_resolver=ParameterDefaultsResolver(catalog=catalog),
        )

    def coordinator(
        self,
        *,
        config: BacktestClientConfig,
        catalog: InMemoryParameterSchemaCatalog,
        listeners: Sequence[BacktestResultListener] = (),
        today: Callable[[], date] = date.today,
    ) -> SessionStateCoordinator:
        form_defaults = config.form_defaults
        return SessionStateCoordinator(
            adapter=self.adapter(catalog=catalog),
            gateway=self.gateway(config=config),
            form_fields=BacktestFormFields.defaults(
                today=today(),
                initial_capital=form_defaults.initial_capital,
                shares_per_trade=form_defaults.shares_per_trade,
                lookback_years=form_defaults.lookback_years,
            ),
            listeners=listeners,
            today=today,
        )
