"""
Image generation provider clients.

Exports:
  - ImageGenerationParams, ImageClient: Provider-neutral call contract
  - DeepAIImageClient: DeepAI text2img over HTTP with retry
  - GeminiImageClient: Google Gemini image generation
  - get_image_client(): Provider factory driven by settings
"""

from base0.boundary.image_api.base import ImageClient, ImageGenerationParams
from base0.boundary.image_api.deepai_client import DeepAIImageClient
from base0.boundary.image_api.gemini_client import GeminiImageClient
from base0.boundary.image_api.factory import get_image_client

__all__ = [
    "ImageClient",
    "ImageGenerationParams",
    "DeepAIImageClient",
    "GeminiImageClient",
    "get_image_client",
]
