from __future__ import annotations

import logging
from typing import Any

import httpx

from tradelab.contexts.strategy_catalog.adapters.outbound.catalog import (
    InMemoryParameterSchemaCatalog,
    descriptors_from_payload,
)
from tradelab.contexts.strategy_catalog.domain.entities import BasicStrategyDescriptor

log = logging.getLogger(__name__)

_STRATEGIES_CATALOG_PATH = "/backtest/strategies"


class StrategyCatalogUnavailableError(RuntimeError):
    """
    Raised when the remote strategy catalog cannot be fetched or parsed.

    Docs: docs/architecture/backtest/backtest-request-construction-v1.md
    Related: .httpx_strategy_catalog_client, apps/cli/wiring/modules/backtest.py
    """


class HttpxStrategyCatalogClient:
    """
    HttpxStrategyCatalogClient reads `GET /backtest/strategies` through `httpx`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/strategy_catalog/adapters/outbound/catalog/catalog_payload.py
      - src/tradelab/contexts/backtest/adapters/outbound/config/backtest_client_config.py
      - apps/cli/wiring/modules/backtest.py
    """

    def __init__(
        self,
        *,
        api_base_url: str,
        timeout_seconds: float = 10.0,
        path: str = _STRATEGIES_CATALOG_PATH,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize catalog adapter with immutable HTTP settings and optional mock transport.

        Args:
            api_base_url: Absolute API base URL.
            timeout_seconds: HTTP timeout for catalog lookup.
            path: Catalog endpoint path.
            transport: Optional httpx transport override used in tests.
        Returns:
            None.
        Assumptions:
            Endpoint returns `{"success": true, "data": {"strategies": [...]}}`.
        Raises:
            ValueError: If URL is blank or timeout is non-positive.
        Side Effects:
            None.
        """
        normalized_api_base_url = api_base_url.strip().rstrip("/")
        if not normalized_api_base_url:
            raise ValueError("HttpxStrategyCatalogClient requires non-empty api_base_url")
        if timeout_seconds <= 0:
            raise ValueError("HttpxStrategyCatalogClient requires positive timeout_seconds")

        self._api_base_url = normalized_api_base_url
        self._timeout_seconds = timeout_seconds
        self._path = "/" + path.strip().lstrip("/")
        self._transport = transport

    def fetch_descriptors(self) -> tuple[BasicStrategyDescriptor, ...]:
        """
        Fetch and parse built-in strategy descriptors.

        Args:
            None.
        Returns:
            tuple[BasicStrategyDescriptor, ...]: Descriptors in server order.
        Assumptions:
            Bare-scalar parameter entries are kept as legacy shorthand.
        Raises:
            StrategyCatalogUnavailableError: On transport failure, non-2xx status,
                unsuccessful envelope, or invalid payload shape.
        Side Effects:
            Performs one outbound HTTP request.
        """
        endpoint_url = f"{self._api_base_url}{self._path}"
        try:
            with httpx.Client(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as http_client:
                response = http_client.get(endpoint_url)
        except httpx.HTTPError as error:
            raise StrategyCatalogUnavailableError(
                f"Strategy catalog request failed: {error}"
            ) from error

        if response.status_code != 200:
            raise StrategyCatalogUnavailableError(
                f"Strategy catalog request failed with status {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as error:
            raise StrategyCatalogUnavailableError(
                "Strategy catalog response is not valid JSON"
            ) from error

        items = _extract_strategies(payload=payload)
        try:
            descriptors = descriptors_from_payload(items)
        except ValueError as error:
            raise StrategyCatalogUnavailableError(
                f"Strategy catalog payload is invalid: {error}"
            ) from error
        log.info("fetched strategy catalog: %d strategies", len(descriptors))
        return descriptors

    def fetch_catalog(self) -> InMemoryParameterSchemaCatalog:
        return InMemoryParameterSchemaCatalog(descriptors=self.fetch_descriptors())


def _extract_strategies(*, payload: Any) -> list[Any]:
    if not isinstance(payload, dict):
        raise StrategyCatalogUnavailableError("Strategy catalog response must be an object")
    if payload.get("success") is False:
        message = payload.get("error") or "Strategy catalog request was not successful"
        raise StrategyCatalogUnavailableError(str(message))
    data = payload.get("data")
    strategies = data.get("strategies") if isinstance(data, dict) else None
    if not isinstance(strategies, list):
        raise StrategyCatalogUnavailableError(
            "Strategy catalog response is missing data.strategies list"
        )
    return strategies
