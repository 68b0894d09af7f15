"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from base0.configs.base import BaseSettings
from base0.configs.database import DatabaseSettings
from base0.configs.filecoin import FilecoinSettings
from base0.configs.image_api import ImageApiSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    image_api: ImageApiSettings = Field(default_factory=ImageApiSettings)
    filecoin: FilecoinSettings = Field(default_factory=FilecoinSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from base0.configs import get_settings
        settings = get_settings()
    """
    return Settings()
