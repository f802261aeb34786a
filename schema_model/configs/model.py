"""
Schema model configuration settings.

Describes one model: which schema to load, how to connect it, and which
optional capabilities to enable. Values come from the model class config,
constructor overrides, or SCHEMA_MODEL_* environment variables (list and
mapping values are read from the environment as JSON).

Dependencies: pydantic, pydantic_settings
System role: Model construction configuration
"""

import json
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModelSettings(BaseSettings):
    """Configuration for a single schema model."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SCHEMA_MODEL_",
        case_sensitive=False,
        extra="ignore",
        arbitrary_types_allowed=True,
        protected_namespaces=(),
    )

    schema_class: Any = Field(
        default=None,
        description="Schema class, declarative base, or import path to either",
    )
    connect_info: Any = Field(
        default=None,
        description="Connection info: dsn string, positional list, or mapping",
    )
    caching: bool | None = Field(
        default=None,
        description="Cursor caching; None enables it when a cached cursor is available",
    )
    storage_type: Any = Field(
        default=None,
        description="Storage type name, import path, or class",
    )
    model_name: str | None = Field(
        default=None,
        description="Registry name; defaults to the model class name",
    )
    roles: list[str] = Field(
        default_factory=list,
        description="Optional capabilities to compose into the model (e.g. replicated)",
    )
    replicants: list[Any] | None = Field(
        default=None,
        description="connect_info for every read replica (replicated role)",
    )

    @field_validator("connect_info", mode="before")
    @classmethod
    def decode_json_connect_info(cls, value: Any) -> Any:
        """Decode JSON lists/mappings supplied as strings (e.g. from the environment)."""
        if isinstance(value, str) and value.lstrip().startswith(("[", "{")):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value
