"""
Google Gemini image generation client.

Calls the synchronous google-genai SDK from a worker thread and returns the
first inline image as a data URI.

Dependencies: google.genai, asyncio, uuid
System role: Alternative upstream image generation provider
"""

import asyncio
import logging
import uuid
from typing import TYPE_CHECKING

import httpx
from google.genai import errors, types

from base0.boundary.image_api.base import ImageGenerationParams, decode_data_uri, to_data_uri
from base0.core.exceptions import GenerationError, NetworkError, UpstreamError
from base0.models.generation import GeneratedImageResult
from base0.observability.log_utils import truncate_prompt

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)


class GeminiImageClient:
    """
    Gemini image client.

    Args:
        client: google-genai client
        model: Image-capable Gemini model name
    """

    provider = "gemini"

    def __init__(self, client: "genai.Client", model: str) -> None:
        self._client = client
        self.model = model

    def build_contents(self, params: ImageGenerationParams) -> list:
        """Prompt text, plus the reference image when one is attached as a data URI."""
        contents: list = []
        if params.base_image and params.base_image.startswith("data:image/"):
            data, mime_type = decode_data_uri(params.base_image)
            contents.append(types.Part.from_bytes(data=data, mime_type=mime_type))
        text = params.text
        if params.negative_prompt:
            text = f"{text}\n\nAvoid: {params.negative_prompt}"
        contents.append(text)
        return contents

    async def generate(self, params: ImageGenerationParams) -> GeneratedImageResult:
        """
        Generate one image via Gemini.

        Raises:
            UpstreamError: Gemini rejected the request
            NetworkError: Gemini could not be reached
            GenerationError: The response carried no image
        """
        logger.info(
            f"{__name__}:generate - START prompt={truncate_prompt(params.text)!r}, model={self.model}"
        )
        contents = self.build_contents(params)

        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=contents,
            )
        except errors.APIError as e:
            logger.error(f"{__name__}:generate - Gemini API error {e.code}: {e.message}")
            if e.code in (401, 403):
                raise UpstreamError(
                    "Invalid API key. Please check your Gemini API configuration.", 401
                ) from e
            if e.code == 429:
                raise UpstreamError("Rate limit exceeded. Please try again later.", 429) from e
            raise UpstreamError(
                f"Gemini API error: {e.code}",
                e.code or 500,
                details={"body": e.message},
            ) from e
        except httpx.TimeoutException as e:
            raise NetworkError("Image generation request timed out", timed_out=True) from e
        except httpx.TransportError as e:
            raise NetworkError("Network error connecting to image generation service") from e

        for candidate in response.candidates or []:
            if candidate.content is None:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data and part.inline_data.data:
                    mime_type = part.inline_data.mime_type or "image/png"
                    image_url = to_data_uri(part.inline_data.data, mime_type)
                    image_id = f"gemini_{uuid.uuid4().hex}"
                    logger.info(
                        f"{__name__}:generate - END id={image_id}, mime_type={mime_type}"
                    )
                    return GeneratedImageResult(
                        image_url=image_url,
                        id=image_id,
                        backend_request_id=getattr(response, "response_id", None),
                    )

        raise GenerationError(
            "Failed to process image generation request",
            details={"reason": "No image data found in Gemini response"},
        )
