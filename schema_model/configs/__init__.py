"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from schema_model.configs.model import SchemaModelSettings
from schema_model.configs.settings import Settings, get_settings

__all__ = ["SchemaModelSettings", "Settings", "get_settings"]
