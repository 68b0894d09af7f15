"""
Test suite for the DeepAI image client.

Covers multipart form construction, retry on transport failures, and the
mapping of upstream statuses to tagged errors. Upstream HTTP is served by
httpx.MockTransport; backoff waits are disabled.

System role: Verification of the image generation boundary
"""

import base64
import json

import httpx
import pytest

from base0.boundary.image_api.base import ImageGenerationParams
from base0.boundary.image_api.deepai_client import DeepAIImageClient
from base0.core.exceptions import (
    ErrorKind,
    GenerationError,
    NetworkError,
    UpstreamError,
    ValidationError,
)

SUCCESS_BODY = {
    "id": "abc-123",
    "output_url": "https://api.deepai.org/job-view-file/abc/outputs/output.jpg",
    "share_url": "https://deepai.org/art/abc",
    "backend_request_id": "req-1",
}


def make_client(handler, no_wait, max_attempts: int = 3) -> DeepAIImageClient:
    return DeepAIImageClient(
        api_key="test-key",
        max_attempts=max_attempts,
        transport=httpx.MockTransport(handler),
        wait=no_wait,
    )


def body_of(request: httpx.Request) -> bytes:
    request.read()
    return request.content


class TestBuildForm:
    """Test suite for multipart field construction."""

    def test_standard_request_omits_genius_preference(self) -> None:
        client = DeepAIImageClient(api_key="k")
        fields = dict(client.build_form(ImageGenerationParams(text="a cat")))

        assert fields["text"] == (None, "a cat")
        assert fields["width"] == (None, "512")
        assert fields["image_generator_version"] == (None, "standard")
        assert "genius_preference" not in fields
        assert "negative_prompt" not in fields

    def test_genius_request_includes_preference_and_negative_prompt(self) -> None:
        client = DeepAIImageClient(api_key="k")
        params = ImageGenerationParams(
            text="a cat",
            version="genius",
            preference="anime",
            negative_prompt="blurry",
        )
        fields = dict(client.build_form(params))

        assert fields["genius_preference"] == (None, "anime")
        assert fields["negative_prompt"] == (None, "blurry")

    def test_data_uri_base_image_becomes_png_file_part(self) -> None:
        client = DeepAIImageClient(api_key="k")
        png = b"\x89PNG\r\n\x1a\nfake"
        data_uri = "data:image/png;base64," + base64.b64encode(png).decode()

        fields = dict(client.build_form(ImageGenerationParams(text="x", base_image=data_uri)))

        assert fields["image"] == ("base_image.png", png, "image/png")

    def test_url_base_image_is_passed_as_field(self) -> None:
        client = DeepAIImageClient(api_key="k")
        fields = dict(
            client.build_form(ImageGenerationParams(text="x", base_image="https://example.com/a.png"))
        )

        assert fields["image"] == (None, "https://example.com/a.png")

    def test_malformed_data_uri_is_rejected(self) -> None:
        client = DeepAIImageClient(api_key="k")

        with pytest.raises(ValidationError) as exc_info:
            client.build_form(ImageGenerationParams(text="x", base_image="data:image/png;base64,@@@"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid base image data"


class TestRetry:
    """Test suite for the transport-error retry loop."""

    @pytest.mark.asyncio
    async def test_three_timeouts_make_three_attempts_then_time_out(self, no_wait) -> None:
        """Test exhausted timeouts surface as a 408 network error."""
        # Arrange
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler, no_wait)

        # Act
        with pytest.raises(NetworkError) as exc_info:
            await client.generate(ImageGenerationParams(text="test"))

        # Assert
        assert len(attempts) == 3
        assert exc_info.value.timed_out is True
        assert exc_info.value.status_code == 408
        assert "timed out" in exc_info.value.message
        assert exc_info.value.details["attempts"] == 3

    @pytest.mark.asyncio
    async def test_connection_error_then_success_returns_after_two_attempts(self, no_wait) -> None:
        """Test a single non-timeout network failure is retried transparently."""
        # Arrange
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=SUCCESS_BODY)

        client = make_client(handler, no_wait)

        # Act
        result = await client.generate(ImageGenerationParams(text="test"))

        # Assert
        assert len(attempts) == 2
        assert result.image_url == SUCCESS_BODY["output_url"]
        assert result.id == "abc-123"
        assert result.backend_request_id == "req-1"

    @pytest.mark.asyncio
    async def test_persistent_connection_errors_report_network_error(self, no_wait) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            await make_client(handler, no_wait).generate(ImageGenerationParams(text="test"))

        assert exc_info.value.timed_out is False
        assert exc_info.value.status_code == 503
        assert exc_info.value.kind is ErrorKind.NETWORK

    @pytest.mark.asyncio
    async def test_http_errors_are_not_retried(self, no_wait) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(500, text="boom")

        with pytest.raises(UpstreamError) as exc_info:
            await make_client(handler, no_wait).generate(ImageGenerationParams(text="test"))

        assert len(attempts) == 1
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "DeepAI API error: 500"
        assert exc_info.value.details == {"body": "boom"}


class TestResponseMapping:
    """Test suite for upstream status and payload mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, message",
        [
            (401, "Invalid API key"),
            (429, "Rate limit exceeded"),
        ],
    )
    async def test_auth_and_rate_limit_statuses_pass_through(self, no_wait, status, message) -> None:
        client = make_client(lambda request: httpx.Response(status, text="nope"), no_wait)

        with pytest.raises(UpstreamError) as exc_info:
            await client.generate(ImageGenerationParams(text="test"))

        assert exc_info.value.status_code == status
        assert exc_info.value.message.startswith(message)

    @pytest.mark.asyncio
    async def test_missing_output_url_is_generation_error(self, no_wait) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"id": "x"}), no_wait)

        with pytest.raises(GenerationError) as exc_info:
            await client.generate(ImageGenerationParams(text="test"))

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_request_carries_api_key_header_and_form(self, no_wait) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["api_key"] = request.headers["api-key"]
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = body_of(request)
            return httpx.Response(200, content=json.dumps(SUCCESS_BODY))

        await make_client(handler, no_wait).generate(ImageGenerationParams(text="a lighthouse"))

        assert seen["api_key"] == "test-key"
        assert seen["content_type"].startswith("multipart/form-data")
        assert b"a lighthouse" in seen["body"]
