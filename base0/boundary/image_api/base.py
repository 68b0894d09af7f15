"""
Provider-neutral image generation contract.

Dependencies: pydantic
System role: Interface between the generation service and provider clients
"""

import base64
import binascii
from typing import Protocol

from pydantic import BaseModel

from base0.core.exceptions import ValidationError
from base0.models.generation import GeneratedImageResult, GeniusPreference, ImageGeneratorVersion


class ImageGenerationParams(BaseModel):
    """Everything a provider needs for one call; ``text`` is already enhanced."""

    text: str
    width: int = 512
    height: int = 512
    version: ImageGeneratorVersion = "standard"
    preference: GeniusPreference = "photography"
    negative_prompt: str | None = None
    base_image: str | None = None


class ImageClient(Protocol):
    """Anything that turns generation parameters into a hosted image."""

    provider: str

    async def generate(self, params: ImageGenerationParams) -> GeneratedImageResult: ...


def decode_data_uri(data_uri: str) -> tuple[bytes, str]:
    """
    Split a ``data:<mime>;base64,<payload>`` URI into bytes and MIME type.

    Raises:
        ValidationError: If the URI is not valid base64 image data
    """
    try:
        header, payload = data_uri.split(",", 1)
        mime_type = header[len("data:"):].split(";", 1)[0] or "image/png"
        return base64.b64decode(payload, validate=True), mime_type
    except (ValueError, binascii.Error) as e:
        raise ValidationError("Invalid base image data", field="baseObject") from e


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"
