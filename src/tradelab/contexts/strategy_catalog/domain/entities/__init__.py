from .parameter_def import ParameterDef, ParameterValue
from .parameter_kind import ParameterKind
from .strategy_descriptor import BasicStrategyDescriptor, ParameterSchema, ParameterSchemaEntry

__all__ = [
    "BasicStrategyDescriptor",
    "ParameterDef",
    "ParameterKind",
    "ParameterSchema",
    "ParameterSchemaEntry",
    "ParameterValue",
]
