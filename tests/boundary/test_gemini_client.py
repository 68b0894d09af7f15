"""
Test suite for the Gemini image client.

The google-genai client is a MagicMock; responses are plain namespaces with
the candidate/content/part shape the SDK returns.
"""

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from google.genai import errors

from base0.boundary.image_api.base import ImageGenerationParams
from base0.boundary.image_api.gemini_client import GeminiImageClient
from base0.core.exceptions import GenerationError, NetworkError, UpstreamError

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def image_response(data: bytes = PNG_BYTES, mime_type: str = "image/png"):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(candidates=[candidate], response_id="resp-1")


def make_client(response=None, error: Exception | None = None) -> GeminiImageClient:
    genai_client = MagicMock()
    if error is not None:
        genai_client.models.generate_content.side_effect = error
    else:
        genai_client.models.generate_content.return_value = response
    return GeminiImageClient(genai_client, model="gemini-2.5-flash-image")


class TestBuildContents:
    """Prompt assembly for the SDK call."""

    def test_text_only(self):
        client = make_client(image_response())

        contents = client.build_contents(ImageGenerationParams(text="a red bicycle"))

        assert contents == ["a red bicycle"]

    def test_negative_prompt_appended(self):
        client = make_client(image_response())

        contents = client.build_contents(ImageGenerationParams(text="a cat", negative_prompt="dogs"))

        assert contents == ["a cat\n\nAvoid: dogs"]

    def test_data_uri_base_image_becomes_inline_part(self):
        client = make_client(image_response())
        base_image = f"data:image/jpeg;base64,{base64.b64encode(b'jpegdata').decode()}"

        contents = client.build_contents(ImageGenerationParams(text="restyle", base_image=base_image))

        assert len(contents) == 2
        assert contents[0].inline_data.data == b"jpegdata"
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert contents[1] == "restyle"

    def test_hosted_base_image_is_not_attached(self):
        client = make_client(image_response())

        contents = client.build_contents(
            ImageGenerationParams(text="restyle", base_image="https://images.example/base.png")
        )

        assert contents == ["restyle"]


class TestGenerate:
    """Response parsing and error mapping."""

    @pytest.mark.asyncio
    async def test_returns_inline_image_as_data_uri(self):
        # Arrange
        client = make_client(image_response())

        # Act
        result = await client.generate(ImageGenerationParams(text="a red bicycle"))

        # Assert
        assert result.image_url == f"data:image/png;base64,{base64.b64encode(PNG_BYTES).decode()}"
        assert result.id.startswith("gemini_")
        assert result.backend_request_id == "resp-1"
        call = client._client.models.generate_content.call_args
        assert call.kwargs["model"] == "gemini-2.5-flash-image"
        assert call.kwargs["contents"] == ["a red bicycle"]

    @pytest.mark.asyncio
    async def test_skips_text_parts(self):
        text_part = SimpleNamespace(inline_data=None)
        image_part = SimpleNamespace(inline_data=SimpleNamespace(data=PNG_BYTES, mime_type=None))
        response = SimpleNamespace(
            candidates=[
                SimpleNamespace(content=None),
                SimpleNamespace(content=SimpleNamespace(parts=[text_part, image_part])),
            ],
        )
        client = make_client(response)

        result = await client.generate(ImageGenerationParams(text="x"))

        assert result.image_url.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_no_image_raises_generation_error(self):
        client = make_client(SimpleNamespace(candidates=[]))

        with pytest.raises(GenerationError) as exc_info:
            await client.generate(ImageGenerationParams(text="x"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["reason"] == "No image data found in Gemini response"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code,expected_status,expected_message",
        [
            (401, 401, "Invalid API key. Please check your Gemini API configuration."),
            (403, 401, "Invalid API key. Please check your Gemini API configuration."),
            (429, 429, "Rate limit exceeded. Please try again later."),
            (400, 400, "Gemini API error: 400"),
        ],
    )
    async def test_api_errors_are_mapped(self, code, expected_status, expected_message):
        error = errors.ClientError(code, {"error": {"code": code, "message": "nope", "status": "X"}})
        client = make_client(error=error)

        with pytest.raises(UpstreamError) as exc_info:
            await client.generate(ImageGenerationParams(text="x"))

        assert exc_info.value.status_code == expected_status
        assert exc_info.value.message == expected_message

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        client = make_client(error=httpx.ReadTimeout("slow"))

        with pytest.raises(NetworkError) as exc_info:
            await client.generate(ImageGenerationParams(text="x"))

        assert exc_info.value.status_code == 408

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self):
        client = make_client(error=httpx.ConnectError("refused"))

        with pytest.raises(NetworkError) as exc_info:
            await client.generate(ImageGenerationParams(text="x"))

        assert exc_info.value.status_code == 503
