from .parameter_schema_catalog import ParameterSchemaCatalog

__all__ = ["ParameterSchemaCatalog"]
