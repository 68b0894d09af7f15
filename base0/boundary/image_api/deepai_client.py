"""
DeepAI text-to-image client.

Posts multipart form data to the DeepAI text2img endpoint. Transport failures
(timeouts, refused connections, DNS) are retried with exponential backoff;
any HTTP response, successful or not, ends the retry loop.

Dependencies: httpx, tenacity
System role: Upstream image generation provider
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from base0.boundary.image_api.base import ImageGenerationParams, decode_data_uri
from base0.core.exceptions import GenerationError, NetworkError, UpstreamError
from base0.models.generation import GeneratedImageResult
from base0.observability.log_utils import truncate_prompt

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.deepai.org/api/text2img"

TIMEOUT_MESSAGE = (
    "Image generation request timed out after multiple attempts. Please try again later."
)
NETWORK_MESSAGE = (
    "Network error connecting to image generation service after multiple attempts. "
    "Please check your internet connection and try again."
)


class DeepAIImageClient:
    """
    DeepAI client with bounded retry on network errors.

    Args:
        api_key: DeepAI API key, sent as the ``api-key`` header
        endpoint: text2img endpoint URL
        max_attempts: Total attempts per request (first try included)
        timeout_seconds: Per-attempt timeout
        backoff_initial_seconds: Wait before the second attempt; doubles after
        backoff_max_seconds: Cap on a single wait
        transport: Optional httpx transport (tests use MockTransport)
        wait: Optional tenacity wait strategy overriding the backoff settings
    """

    provider = "deepai"

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        max_attempts: int = 3,
        timeout_seconds: float = 60.0,
        backoff_initial_seconds: float = 1.0,
        backoff_max_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        wait: wait_base | None = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._wait = wait or wait_exponential(
            multiplier=backoff_initial_seconds,
            max=backoff_max_seconds,
        )

    def build_form(self, params: ImageGenerationParams) -> list[tuple[str, Any]]:
        """
        Build multipart fields in the order DeepAI documents them.

        Plain fields use a ``None`` filename so httpx always sends
        multipart/form-data, with or without a file part.
        """
        fields: list[tuple[str, Any]] = [
            ("text", (None, params.text)),
            ("width", (None, str(params.width))),
            ("height", (None, str(params.height))),
            ("image_generator_version", (None, params.version)),
        ]
        if params.version == "genius":
            fields.append(("genius_preference", (None, params.preference)))
        if params.negative_prompt:
            fields.append(("negative_prompt", (None, params.negative_prompt)))

        base_image = params.base_image
        if base_image:
            if base_image.startswith("data:image/"):
                data, _ = decode_data_uri(base_image)
                fields.append(("image", ("base_image.png", data, "image/png")))
                logger.debug(f"{__name__}:build_form - Added base image: {len(data)} bytes")
            elif base_image.startswith("http"):
                fields.append(("image", (None, base_image)))
                logger.debug(f"{__name__}:build_form - Added base image URL")
        return fields

    async def generate(self, params: ImageGenerationParams) -> GeneratedImageResult:
        """
        Generate one image.

        Args:
            params: Enhanced prompt and generation parameters

        Returns:
            GeneratedImageResult: Hosted image URL and upstream identifiers

        Raises:
            ValidationError: Base image is not decodable
            UpstreamError: DeepAI answered with a non-2xx status
            GenerationError: DeepAI answered 2xx without an output URL
            NetworkError: Every attempt failed at the transport level
        """
        fields = self.build_form(params)
        logger.info(
            f"{__name__}:generate - START prompt={truncate_prompt(params.text)!r}, "
            f"size={params.width}x{params.height}, version={params.version}"
        )

        attempts = 0

        async def post_once() -> httpx.Response:
            nonlocal attempts
            attempts += 1
            logger.info(f"{__name__}:generate - Attempt {attempts}/{self.max_attempts}")
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                return await client.post(
                    self.endpoint,
                    headers={"api-key": self.api_key},
                    files=fields,
                )

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:generate - Attempt {retry_state.attempt_number} failed "
                f"({type(retry_state.outcome.exception()).__name__}), retrying"
            ),
            reraise=True,
        )

        try:
            response = await retrying(post_once)
        except httpx.TimeoutException as e:
            logger.error(f"{__name__}:generate - All {attempts} attempts timed out")
            raise NetworkError(TIMEOUT_MESSAGE, timed_out=True, attempts=attempts) from e
        except httpx.TransportError as e:
            logger.error(
                f"{__name__}:generate - All {attempts} attempts failed with network error: {e}"
            )
            raise NetworkError(NETWORK_MESSAGE, attempts=attempts) from e

        logger.info(f"{__name__}:generate - DeepAI response status: {response.status_code}")
        result = self._parse_response(response)
        logger.info(f"{__name__}:generate - END id={result.id}")
        return result

    def _parse_response(self, response: httpx.Response) -> GeneratedImageResult:
        """Map a DeepAI HTTP response to a result or a tagged error."""
        if not response.is_success:
            body = response.text
            logger.error(f"{__name__}:_parse_response - DeepAI API error: {body[:200]}")
            if response.status_code == 401:
                raise UpstreamError(
                    "Invalid API key. Please check your DeepAI API configuration.", 401
                )
            if response.status_code == 429:
                raise UpstreamError("Rate limit exceeded. Please try again later.", 429)
            raise UpstreamError(
                f"DeepAI API error: {response.status_code}",
                response.status_code,
                details={"body": body},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise GenerationError(
                "Failed to process image generation request",
                details={"reason": "Invalid response: body is not JSON"},
            ) from e

        if not isinstance(payload, dict) or not payload.get("output_url"):
            raise GenerationError(
                "Failed to process image generation request",
                details={"reason": "Invalid response: missing output_url"},
            )

        return GeneratedImageResult(
            image_url=payload["output_url"],
            id=str(payload.get("id", "")),
            share_url=payload.get("share_url"),
            backend_request_id=payload.get("backend_request_id"),
            nsfw_score=payload.get("nsfw_score"),
        )
