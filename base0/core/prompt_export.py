"""
Portable export documents for generation history.

Dependencies: pydantic
System role: JSON export, filename and cost helpers for pinning prompts
"""

import json
import re
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from base0.models.prompt import (
    ExportImage,
    ExportParameters,
    FilecoinExportInfo,
    GeneratedImage,
    PromptExportDocument,
    UserPrompt,
)

FIL_PER_BYTE = 0.0000000001
COLLATERAL_RATE = 0.1
PLATFORM_FEE_RATE = 0.05


def iso_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix."""
    dt = dt.astimezone(timezone.utc) if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def convert_to_prompt_metadata(
    prompt: UserPrompt,
    images: list[GeneratedImage],
    model: str = "deepai-text2img",
) -> PromptExportDocument:
    """Build the export document for one prompt and its images."""
    metadata = prompt.metadata
    return PromptExportDocument(
        generated_at=iso_timestamp(prompt.timestamp),
        model=model,
        parameters=ExportParameters(
            prompt=prompt.prompt,
            enhanced_prompt=prompt.enhanced_prompt,
            quality=metadata.version,
            style=metadata.preference,
            aspect_ratio=f"{metadata.width}:{metadata.height}",
        ),
        images=[
            ExportImage(
                id=image.id,
                filename=f"{prompt.id}_{image.id}.png",
                width=image.metadata.get("width", metadata.width),
                height=image.metadata.get("height", metadata.height),
                url=image.image_url,
            )
            for image in images
        ],
        filecoin=FilecoinExportInfo(
            uploaded=prompt.cid is not None,
            piece_cid=prompt.cid,
        ),
    )


def generate_filecoin_filename(prompt: UserPrompt) -> str:
    """e.g. base0-generation-2024-01-01T12-00-00-000Z-a-red-bicycle.json"""
    timestamp = re.sub(r"[:.]", "-", iso_timestamp(prompt.timestamp))
    slug = re.sub(r"[^a-z0-9\s]", "", prompt.prompt.lower())
    slug = re.sub(r"\s+", "-", slug)[:50]
    return f"base0-generation-{timestamp}-{slug}.json"


def validate_prompt_json(text: str) -> tuple[bool, PromptExportDocument | None, str | None]:
    """
    Check that `text` is a re-importable export document.

    Returns:
        tuple: (valid, parsed document or None, error message or None)
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        return False, None, "Invalid JSON format"

    if not isinstance(raw, dict) or not raw.get("version") or "parameters" not in raw or "images" not in raw:
        return False, None, "Invalid JSON structure"
    if not (raw["parameters"] or {}).get("prompt"):
        return False, None, "Missing prompt in parameters"
    if not isinstance(raw["images"], list) or not raw["images"]:
        return False, None, "No images found in JSON"

    try:
        return True, PromptExportDocument.model_validate(raw), None
    except PydanticValidationError:
        return False, None, "Invalid JSON structure"


def estimate_storage_cost(size_in_bytes: int, duration_days: int = 365) -> dict:
    """Rough FIL estimate for long-term storage, including collateral and platform fee."""
    storage = size_in_bytes * FIL_PER_BYTE * (duration_days / 365)
    collateral = storage * COLLATERAL_RATE
    platform_fee = storage * PLATFORM_FEE_RATE
    total = storage + collateral + platform_fee
    return {
        "estimatedCostFIL": total,
        "costBreakdown": {
            "storagePrice": storage,
            "clientCollateral": collateral,
            "platformFee": platform_fee,
            "total": total,
        },
    }
