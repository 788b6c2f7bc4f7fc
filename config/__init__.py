"""
Configuration package - schema-validated settings for the animals store
"""

from .app_config import AppConfig, ConfigurationError, SchemaValidationError, load_config


__all__ = ["AppConfig", "ConfigurationError", "SchemaValidationError", "load_config"]
