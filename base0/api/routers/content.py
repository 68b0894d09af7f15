"""
Content registry API endpoints.

Routes:
- POST /content - Register content
- GET /content/active - Active content
- GET /content/fee - Platform fee percentage
- GET /content/owned/{address} - Content owned by a wallet
- GET /content/purchased/{address} - Content a wallet has access to
- GET /content/{id} - Content details
- GET /content/{id}/cid - Data CID, for callers with access
- POST /content/{id}/purchase - Buy time-bounded access
- GET /content/{id}/deal - Storage deal status
- POST /content/{id}/deal - Attach a storage deal (owner only)
- POST /content/{id}/active - Activate or deactivate (owner only)

Prices are FIL decimal strings on the wire.

Dependencies: base0.application.services, base0.models
System role: Pay-to-unlock content HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from base0.api.deps.dependencies import get_content_service
from base0.application.services.content_service import ContentService
from base0.models.content import (
    ContentCidResponse,
    ContentCreatedResponse,
    DealStatusResponse,
    PurchaseAccessRequest,
    RecordDealRequest,
    StoreContentRequest,
    StoredContentResponse,
)

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


@router.post("", response_model=ContentCreatedResponse, status_code=201)
@handle_api_errors
async def store_content(
    request: StoreContentRequest,
    content_service: ContentService = Depends(get_content_service),
) -> ContentCreatedResponse:
    """
    Register content; the caller becomes its owner.

    Args:
        request: CIDs, price (FIL), title, description and piece size
        content_service: Injected ContentService

    Returns:
        ContentCreatedResponse: New content ID and transaction hash

    Raises:
        HTTPException(400): Empty CID or non-positive price
    """
    logger.info(f"{__name__}:store_content - '{request.title}' by {request.owner} at {request.price} FIL")
    return await content_service.store_content(request)


@router.get("/active", response_model=list[StoredContentResponse])
@handle_api_errors
async def list_active_content(
    caller: str | None = Query(default=None),
    content_service: ContentService = Depends(get_content_service),
) -> list[StoredContentResponse]:
    return await content_service.list_active(caller)


@router.get("/fee")
@handle_api_errors
async def get_platform_fee(content_service: ContentService = Depends(get_content_service)) -> dict:
    return {"platformFeePercentage": await content_service.platform_fee_percentage()}


@router.get("/owned/{address}", response_model=list[StoredContentResponse])
@handle_api_errors
async def list_owned_content(
    address: str,
    content_service: ContentService = Depends(get_content_service),
) -> list[StoredContentResponse]:
    return await content_service.list_owned(address)


@router.get("/purchased/{address}", response_model=list[StoredContentResponse])
@handle_api_errors
async def list_purchased_content(
    address: str,
    content_service: ContentService = Depends(get_content_service),
) -> list[StoredContentResponse]:
    return await content_service.list_purchased(address)


@router.get("/{content_id}", response_model=StoredContentResponse)
@handle_api_errors
async def get_content(
    content_id: int,
    caller: str | None = Query(default=None),
    content_service: ContentService = Depends(get_content_service),
) -> StoredContentResponse:
    return await content_service.get_content(content_id, caller)


@router.get("/{content_id}/cid", response_model=ContentCidResponse)
@handle_api_errors
async def get_content_cid(
    content_id: int,
    caller: str = Query(..., description="Address asking for the CID"),
    content_service: ContentService = Depends(get_content_service),
) -> ContentCidResponse:
    """
    Reveal the data CID to the owner or a buyer with unexpired access.

    Raises:
        HTTPException(403): Purchase required or access expired
        HTTPException(404): Unknown content
    """
    return await content_service.get_cid(content_id, caller)


@router.post("/{content_id}/purchase")
@handle_api_errors
async def purchase_access(
    content_id: int,
    request: PurchaseAccessRequest,
    content_service: ContentService = Depends(get_content_service),
) -> dict:
    """
    Buy 365 days of access.

    Raises:
        HTTPException(400): Inactive content, owner purchase or wrong amount
        HTTPException(404): Unknown content
    """
    logger.info(f"{__name__}:purchase_access - {request.buyer} buying content {content_id}")
    return await content_service.purchase_access(content_id, request)


@router.get("/{content_id}/deal", response_model=DealStatusResponse)
@handle_api_errors
async def get_deal_status(
    content_id: int,
    content_service: ContentService = Depends(get_content_service),
) -> DealStatusResponse:
    return await content_service.get_deal_status(content_id)


@router.post("/{content_id}/deal", response_model=DealStatusResponse)
@handle_api_errors
async def record_deal(
    content_id: int,
    request: RecordDealRequest,
    caller: str = Query(...),
    content_service: ContentService = Depends(get_content_service),
) -> DealStatusResponse:
    return await content_service.record_deal(content_id, request, caller)


@router.post("/{content_id}/active", response_model=StoredContentResponse)
@handle_api_errors
async def set_content_active(
    content_id: int,
    active: bool = Query(...),
    caller: str = Query(...),
    content_service: ContentService = Depends(get_content_service),
) -> StoredContentResponse:
    return await content_service.set_active(content_id, active, caller)
