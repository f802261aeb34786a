"""
Application settings.

Settings shared by every model hosted in one application: environment,
logging, and the mount prefix of the bundled routers.

Dependencies: pydantic, pydantic_settings
System role: Central configuration for applications hosting schema models
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings shared by every model."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_prefix: str = Field(default="/api/v1", description="Prefix for bundled routers")


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; tests call
    ``get_settings.cache_clear()`` after changing them.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
