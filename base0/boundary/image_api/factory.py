"""
Image client factory.

Dependencies: google.genai, base0.configs
System role: Selects and configures the upstream image provider
"""

import logging

from google import genai

from base0.boundary.image_api.base import ImageClient
from base0.boundary.image_api.deepai_client import DeepAIImageClient
from base0.boundary.image_api.gemini_client import GeminiImageClient
from base0.configs.image_api import ImageApiSettings
from base0.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_image_client(settings: ImageApiSettings) -> ImageClient:
    """
    Build the configured provider client.

    Args:
        settings: Image API settings

    Returns:
        ImageClient: DeepAI or Gemini client

    Raises:
        ConfigurationError: If the selected provider has no API key
    """
    if settings.provider == "gemini":
        if not settings.gemini_api_key:
            logger.error(f"{__name__}:get_image_client - Gemini API key not found in environment")
            raise ConfigurationError("Gemini API key not configured")
        return GeminiImageClient(
            client=genai.Client(api_key=settings.gemini_api_key),
            model=settings.gemini_model,
        )

    if not settings.deepai_api_key:
        logger.error(f"{__name__}:get_image_client - DeepAI API key not found in environment")
        raise ConfigurationError("DeepAI API key not configured")
    return DeepAIImageClient(
        api_key=settings.deepai_api_key,
        endpoint=settings.deepai_endpoint,
        max_attempts=settings.max_attempts,
        timeout_seconds=settings.timeout_seconds,
        backoff_initial_seconds=settings.backoff_initial_seconds,
        backoff_max_seconds=settings.backoff_max_seconds,
    )
