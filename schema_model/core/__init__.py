"""
Core domain layer: exceptions and object loading.
"""

from schema_model.core.exceptions import (
    ConfigurationError,
    CursorCapabilityError,
    CursorClassLoadError,
    InvalidConnectInfo,
    MissingConnectInfo,
    SchemaClassError,
    SchemaModelException,
    SchemaNotConnectedError,
    StorageTypeError,
    UnknownModelError,
    UnknownRoleError,
    UnknownSourceError,
)
from schema_model.core.loading import load_object

__all__ = [
    "ConfigurationError",
    "CursorCapabilityError",
    "CursorClassLoadError",
    "InvalidConnectInfo",
    "MissingConnectInfo",
    "SchemaClassError",
    "SchemaModelException",
    "SchemaNotConnectedError",
    "StorageTypeError",
    "UnknownModelError",
    "UnknownRoleError",
    "UnknownSourceError",
    "load_object",
]
