"""
Image generation API configuration.

Selects the upstream provider (DeepAI or Gemini) and holds its credentials,
retry and timeout policy.

Dependencies: pydantic, pydantic_settings
System role: Image generation client configuration
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from base0.configs.base import BaseSettings


class ImageApiSettings(BaseSettings):
    """Upstream image generation provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMAGE_API_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    provider: Literal["deepai", "gemini"] = Field(
        default="deepai",
        description="Upstream image generation provider",
    )
    deepai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DEEP_API_KEY", "NEXT_PUBLIC_DEEP_API_KEY"),
        description="DeepAI API key (server or client-exposed variant)",
    )
    deepai_endpoint: str = Field(
        default="https://api.deepai.org/api/text2img",
        description="DeepAI text-to-image endpoint",
    )
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Gemini image model",
    )

    max_attempts: int = Field(default=3, description="Attempts per request on network errors")
    timeout_seconds: float = Field(default=60.0, description="Per-attempt timeout")
    backoff_initial_seconds: float = Field(default=1.0, description="First retry wait")
    backoff_max_seconds: float = Field(default=5.0, description="Retry wait cap")
