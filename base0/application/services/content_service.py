"""
Content registry service.

Converts between the FIL decimal strings the API speaks and the attoFIL
integers the registry stores.

Dependencies: base0.boundary.chain
System role: Use cases behind /api/content
"""

import logging

from base0.boundary.chain.registry import ContentRegistry
from base0.core.exceptions import ValidationError
from base0.models.content import (
    ContentCidResponse,
    ContentCreatedResponse,
    DealStatusResponse,
    PurchaseAccessRequest,
    RecordDealRequest,
    StoreContentRequest,
    StoredContentResponse,
    parse_fil,
)

logger = logging.getLogger(__name__)


class ContentService:
    """Content registry orchestrator."""

    def __init__(self, registry: ContentRegistry) -> None:
        self.registry = registry

    async def store_content(self, request: StoreContentRequest) -> ContentCreatedResponse:
        created = await self.registry.store_content(
            owner=request.owner,
            piece_cid=request.piece_cid,
            data_cid=request.data_cid,
            price=parse_fil(request.price),
            title=request.title,
            description=request.description,
            piece_size=request.piece_size,
        )
        logger.info(f"{__name__}:store_content - Content {created.content_id} created by {request.owner}")
        return created

    async def purchase_access(self, content_id: int, request: PurchaseAccessRequest) -> dict:
        """
        Buy access for `request.buyer`, paying the listed price unless a value is given.

        Returns:
            dict: content_id, tx_hash and the FIL amount paid
        """
        if request.value is None:
            content = await self.registry.get_content_info(content_id, request.buyer)
            value = content.price
        else:
            try:
                value = parse_fil(request.value)
            except ValueError as e:
                raise ValidationError(str(e), field="value") from e

        tx_hash = await self.registry.purchase_access(content_id, request.buyer, value)
        return {"contentId": content_id, "txHash": tx_hash, "accessDays": 365}

    async def get_content(self, content_id: int, caller: str | None = None) -> StoredContentResponse:
        content = await self.registry.get_content_info(content_id, caller)
        return StoredContentResponse.from_content(content)

    async def get_cid(self, content_id: int, caller: str) -> ContentCidResponse:
        data_cid = await self.registry.get_cid(content_id, caller)
        return ContentCidResponse(content_id=content_id, data_cid=data_cid)

    async def get_deal_status(self, content_id: int) -> DealStatusResponse:
        content = await self.registry.get_content_info(content_id)
        active = await self.registry.check_deal_activation(content_id)
        return DealStatusResponse(content_id=content_id, deal_id=content.deal_id, active=active)

    async def record_deal(self, content_id: int, request: RecordDealRequest, caller: str) -> DealStatusResponse:
        await self.registry.record_deal(content_id, request.deal_id, request.active, caller)
        return await self.get_deal_status(content_id)

    async def set_active(self, content_id: int, active: bool, caller: str) -> StoredContentResponse:
        await self.registry.set_active(content_id, active, caller)
        return await self.get_content(content_id, caller)

    async def list_active(self, caller: str | None = None) -> list[StoredContentResponse]:
        contents = await self.registry.get_all_active_content(caller)
        return [StoredContentResponse.from_content(c) for c in contents]

    async def list_owned(self, address: str) -> list[StoredContentResponse]:
        contents = await self.registry.get_user_owned_content(address)
        return [StoredContentResponse.from_content(c) for c in contents]

    async def list_purchased(self, address: str) -> list[StoredContentResponse]:
        contents = await self.registry.get_user_purchased_content(address)
        return [StoredContentResponse.from_content(c) for c in contents]

    async def platform_fee_percentage(self) -> int:
        return await self.registry.platform_fee_percentage()
