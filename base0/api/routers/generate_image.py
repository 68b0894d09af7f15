"""
Image generation API endpoints.

Routes:
- GET /generate-image - Usage document
- POST /generate-image - Generate one image

Dependencies: base0.application.services, base0.models
System role: Image generation HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from base0.api.deps.dependencies import get_generation_service
from base0.application.services.generation_service import GenerationService
from base0.models.common import UsageResponse
from base0.models.generation import GenerateImageRequest, GenerateImageResponse

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate-image", tags=["generation"])


@router.get("", response_model=UsageResponse)
async def generate_image_usage() -> UsageResponse:
    return GenerationService.usage()


@router.post("", response_model=GenerateImageResponse)
@handle_api_errors
async def generate_image(
    request: GenerateImageRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> GenerateImageResponse:
    """
    Generate an image from a prompt.

    Args:
        request: Prompt and generation parameters
        generation_service: Injected GenerationService

    Returns:
        GenerateImageResponse: Image URL, ids and metadata

    Raises:
        HTTPException(400): Missing prompt or invalid base image
        HTTPException(401/429): Upstream rejected the request
        HTTPException(408/503): Upstream unreachable after retries
        HTTPException(500): Missing API key or malformed upstream response
    """
    return await generation_service.generate(request)
