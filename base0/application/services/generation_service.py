"""
Image generation service.

Validates a generation request, wraps the prompt in the UGC brief and hands
it to the configured provider client.

Dependencies: base0.boundary.image_api, base0.core.prompt_builder
System role: Use case behind POST /api/generate-image
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from base0.boundary.image_api.base import ImageClient, ImageGenerationParams
from base0.core.exceptions import ValidationError
from base0.core.prompt_builder import build_enhanced_prompt
from base0.models.common import UsageResponse
from base0.models.generation import (
    GenerateImageRequest,
    GenerateImageResponse,
    GenerationMetadata,
)
from base0.observability.log_utils import truncate_prompt

logger = logging.getLogger(__name__)

USAGE = (
    "POST with { prompt: string, walletAddress?: string, width?: number, height?: number, "
    "image_generator_version?: 'standard' | 'hd' | 'genius', "
    "genius_preference?: 'anime' | 'photography' | 'graphic' | 'cinematic', "
    "negative_prompt?: string }"
)


class GenerationService:
    """Generation use case over one provider client."""

    def __init__(
        self,
        client: ImageClient | None = None,
        client_factory: Callable[[], ImageClient] | None = None,
    ) -> None:
        """
        Initialize generation service.

        Args:
            client: Provider client (DeepAI or Gemini)
            client_factory: Builds the client on first use; a missing API key
                then fails only once a valid request reaches the provider
        """
        if client is None and client_factory is None:
            raise ValueError("client or client_factory is required")
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self) -> ImageClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def generate(self, request: GenerateImageRequest) -> GenerateImageResponse:
        """
        Generate one image.

        Args:
            request: Prompt and generation parameters

        Returns:
            GenerateImageResponse: Image URL, ids and echoed metadata

        Raises:
            ValidationError: Missing prompt or malformed base image
            UpstreamError: Provider rejected the request
            NetworkError: Provider unreachable after retries
        """
        prompt = (request.prompt or "").strip()
        if not prompt:
            raise ValidationError("Prompt is required", field="prompt")

        has_base_image = bool(request.base_object)
        enhanced = build_enhanced_prompt(request.prompt, request.ugc_options, has_base_image)

        logger.info(
            f"{__name__}:generate - START provider={self.client.provider} "
            f"version={request.image_generator_version} size={request.width}x{request.height} "
            f"prompt='{truncate_prompt(request.prompt)}'"
        )

        result = await self.client.generate(
            ImageGenerationParams(
                text=enhanced,
                width=request.width,
                height=request.height,
                version=request.image_generator_version,
                preference=request.genius_preference,
                negative_prompt=request.negative_prompt,
                base_image=request.base_object,
            )
        )

        logger.info(f"{__name__}:generate - END id={result.id}")
        return GenerateImageResponse(
            image_url=result.image_url,
            share_url=result.share_url,
            id=result.id,
            backend_request_id=result.backend_request_id,
            nsfw_score=result.nsfw_score,
            metadata=GenerationMetadata(
                prompt=enhanced,
                original_prompt=request.prompt,
                wallet_address=request.wallet_address,
                generated_at=datetime.now(timezone.utc).isoformat(),
                width=request.width,
                height=request.height,
                version=request.image_generator_version,
                preference=(
                    request.genius_preference
                    if request.image_generator_version == "genius"
                    else None
                ),
                has_base_image=has_base_image,
                product_type=request.product_type,
                scenario=request.scenario,
            ),
        )

    @staticmethod
    def usage() -> UsageResponse:
        return UsageResponse(message="Image generation API endpoint", usage=USAGE)
