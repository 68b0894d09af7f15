"""
Prompt and image history API endpoints.

Routes:
- GET /history/{address}/prompts - Prompts, newest first
- GET /history/{address}/prompts/{prompt_id} - Single prompt
- GET /history/{address}/prompts/{prompt_id}/images - Images of a prompt
- GET /history/{address}/prompts/{prompt_id}/document - Shareable export document
- GET /history/{address}/images - Images, newest first
- GET /history/{address}/stats - Record counts and size
- GET /history/{address}/export - Full history under legacy keys
- POST /history/documents/validate - Check an export document

Dependencies: base0.application.services, base0.models
System role: History HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from base0.api.deps.dependencies import get_history_service
from base0.application.services.history_service import HistoryService
from base0.core.exceptions import NotFoundError
from base0.core.prompt_export import validate_prompt_json
from base0.models.prompt import (
    GeneratedImage,
    HistoryExport,
    UserPrompt,
    ValidateDocumentRequest,
)

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["history"])


@router.get("/{address}/prompts", response_model=list[UserPrompt])
@handle_api_errors
async def list_prompts(
    address: str,
    history_service: HistoryService = Depends(get_history_service),
) -> list[UserPrompt]:
    return await history_service.get_user_prompts(address)


@router.get("/{address}/prompts/{prompt_id}", response_model=UserPrompt)
@handle_api_errors
async def get_prompt(
    address: str,
    prompt_id: str,
    history_service: HistoryService = Depends(get_history_service),
) -> UserPrompt:
    prompt = await history_service.get_prompt_by_id(address, prompt_id)
    if prompt is None:
        raise NotFoundError(f"Prompt {prompt_id} not found")
    return prompt


@router.get("/{address}/prompts/{prompt_id}/images", response_model=list[GeneratedImage])
@handle_api_errors
async def list_prompt_images(
    address: str,
    prompt_id: str,
    history_service: HistoryService = Depends(get_history_service),
) -> list[GeneratedImage]:
    return await history_service.get_images_by_prompt_id(address, prompt_id)


@router.get("/{address}/prompts/{prompt_id}/document")
@handle_api_errors
async def get_prompt_document(
    address: str,
    prompt_id: str,
    history_service: HistoryService = Depends(get_history_service),
) -> dict:
    """
    Export a prompt with its images as a JSON document ready for pinning.

    Returns:
        dict: filename, document and storage estimate
    """
    return await history_service.get_prompt_document(address, prompt_id)


@router.get("/{address}/images", response_model=list[GeneratedImage])
@handle_api_errors
async def list_images(
    address: str,
    history_service: HistoryService = Depends(get_history_service),
) -> list[GeneratedImage]:
    return await history_service.get_user_images(address)


@router.get("/{address}/stats")
@handle_api_errors
async def get_stats(
    address: str,
    history_service: HistoryService = Depends(get_history_service),
) -> dict:
    return await history_service.get_storage_stats(address)


@router.get("/{address}/export", response_model=HistoryExport)
@handle_api_errors
async def export_history(
    address: str,
    history_service: HistoryService = Depends(get_history_service),
) -> HistoryExport:
    logger.info(f"{__name__}:export_history - Exporting history for {address}")
    return await history_service.export_history(address)


@router.post("/documents/validate")
async def validate_document(request: ValidateDocumentRequest) -> dict:
    """Validate a previously exported prompt document."""
    valid, document, error = validate_prompt_json(request.content)
    return {
        "valid": valid,
        "error": error,
        "document": document.model_dump(mode="json", by_alias=True) if document else None,
    }
