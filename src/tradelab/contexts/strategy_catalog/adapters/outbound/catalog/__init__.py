from .catalog_payload import (
    StrategyDescriptorPayload,
    StrategyParameterPayload,
    descriptor_to_payload,
    descriptors_from_payload,
)
from .in_memory_parameter_schema_catalog import InMemoryParameterSchemaCatalog
from .yaml_strategy_catalog_loader import (
    YamlStrategyCatalogLoader,
    resolve_strategies_config_path,
)

__all__ = [
    "InMemoryParameterSchemaCatalog",
    "StrategyDescriptorPayload",
    "StrategyParameterPayload",
    "YamlStrategyCatalogLoader",
    "descriptor_to_payload",
    "descriptors_from_payload",
    "resolve_strategies_config_path",
]
