"""
Content registry contract.

Mirrors the FilecoinCIDStore surface: owners register content with a piece
CID, a data CID and a price; buyers pay the exact price for 365 days of
access; the owner always has access. Every call names its caller explicitly
since there is no implicit msg.sender on the server side.

Dependencies: typing
System role: Interface between services and the pay-to-unlock registry
"""

from typing import Protocol

from base0.models.content import ContentCreatedResponse, StoredContent

ACCESS_DURATION_SECONDS = 365 * 24 * 60 * 60
PLATFORM_FEE_PERCENTAGE = 5

PURCHASE_REQUIRED = "Purchase required"
ACCESS_EXPIRED = "Access expired"


class ContentRegistry(Protocol):
    """Pay-to-unlock content registry."""

    async def store_content(
        self,
        owner: str,
        piece_cid: str,
        data_cid: str,
        price: int,
        title: str,
        description: str,
        piece_size: int,
    ) -> ContentCreatedResponse: ...

    async def purchase_access(self, content_id: int, buyer: str, value: int) -> str | None: ...

    async def get_cid(self, content_id: int, caller: str) -> str: ...

    async def get_content_info(self, content_id: int, caller: str | None = None) -> StoredContent: ...

    async def get_all_active_content(self, caller: str | None = None) -> list[StoredContent]: ...

    async def get_user_owned_content(self, user: str) -> list[StoredContent]: ...

    async def get_user_purchased_content(self, user: str) -> list[StoredContent]: ...

    async def has_access(self, content_id: int, user: str) -> bool: ...

    async def check_deal_activation(self, content_id: int) -> bool: ...

    async def platform_fee_percentage(self) -> int: ...

    async def record_deal(self, content_id: int, deal_id: int, active: bool, caller: str) -> None: ...

    async def set_active(self, content_id: int, active: bool, caller: str) -> None: ...
