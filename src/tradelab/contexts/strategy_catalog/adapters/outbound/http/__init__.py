from .httpx_strategy_catalog_client import (
    HttpxStrategyCatalogClient,
    StrategyCatalogUnavailableError,
)

__all__ = [
    "HttpxStrategyCatalogClient",
    "StrategyCatalogUnavailableError",
]
