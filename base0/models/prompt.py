"""
Prompt and image history models.

Wire shape matches the records the web client keeps per wallet
(camelCase keys, ISO timestamps).

Dependencies: pydantic
System role: History domain models
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from base0.models.common import CamelModel


class PromptMetadata(CamelModel):
    """Generation parameters recorded with a prompt."""

    width: int = 512
    height: int = 512
    version: str = "standard"
    preference: str | None = None


class UserPrompt(CamelModel):
    """A prompt submitted by a wallet, optionally pinned to Filecoin."""

    id: str
    user_id: str = Field(description="Wallet address of the author")
    prompt: str
    enhanced_prompt: str
    base_image_url: str | None = None
    timestamp: datetime
    cid: str | None = None
    filecoin_url: str | None = None
    metadata: PromptMetadata = Field(default_factory=PromptMetadata)


class GeneratedImage(CamelModel):
    """An image produced for a prompt."""

    id: str
    user_id: str
    prompt_id: str
    image_url: str
    share_url: str | None = None
    deepai_id: str
    timestamp: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class ExportParameters(CamelModel):
    """Parameters block of an exported generation document."""

    prompt: str
    enhanced_prompt: str | None = None
    negative_prompt: str | None = None
    quality: str | None = None
    style: str | None = None
    aspect_ratio: str | None = None


class ExportImage(CamelModel):
    """Image entry of an exported generation document."""

    id: str
    filename: str
    width: int
    height: int
    format: str = "png"
    size: int = 0
    url: str | None = None
    cid: str | None = None


class FilecoinExportInfo(CamelModel):
    """Storage status block of an exported generation document."""

    uploaded: bool = False
    data_cid: str | None = None
    piece_cid: str | None = None
    deal_id: int | None = None
    storage_price: str | None = None
    uploaded_at: str | None = None


class PromptExportDocument(CamelModel):
    """Portable JSON document describing one generation session."""

    version: str = "1.0"
    generated_at: str
    platform: str = "Base0"
    model: str
    parameters: ExportParameters
    images: list[ExportImage]
    filecoin: FilecoinExportInfo = Field(default_factory=FilecoinExportInfo)


class HistoryExport(CamelModel):
    """All persisted history for one wallet, keyed the way the web client stores it."""

    address: str
    entries: dict[str, list[Any]]


class ValidateDocumentRequest(BaseModel):
    """Raw JSON text of a previously exported prompt document."""

    content: str
