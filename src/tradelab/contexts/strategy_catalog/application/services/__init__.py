from .parameter_defaults_resolver import ParameterDefaultsResolver

__all__ = ["ParameterDefaultsResolver"]
