"""
schema_model: SQLAlchemy schemas as FastAPI application models.

Usage:
    from schema_model import SchemaModel
    from schema_model.api import create_app

    class FilmDB(SchemaModel):
        config = {"schema_class": "myapp.schema:FilmBase", "connect_info": "sqlite:///film.db"}

    app = create_app([FilmDB()])
"""

from schema_model.boundary.db import ConnectionSpec, ResultSet, Schema, normalize_connect_info
from schema_model.core.exceptions import (
    ConfigurationError,
    CursorCapabilityError,
    CursorClassLoadError,
    InvalidConnectInfo,
    SchemaModelException,
)
from schema_model.model import SchemaModel

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConnectionSpec",
    "CursorCapabilityError",
    "CursorClassLoadError",
    "InvalidConnectInfo",
    "ResultSet",
    "Schema",
    "SchemaModel",
    "SchemaModelException",
    "normalize_connect_info",
]
