"""
Shared settings base for Base0.

Every settings group (database, image API, Filecoin) reads the same `.env`
file, matches variable names case-insensitively and skips keys that belong
to another group.

Dependencies: pydantic_settings
System role: Common parent of the Base0 settings classes
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BaseSettings(PydanticBaseSettings):
    """Settings behaviour shared by every Base0 config group."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(
        default="INFO",
        description="Root log level applied at application startup",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept `debug` as well as `DEBUG` from the environment."""
        return value.upper() if isinstance(value, str) else value
