"""
Test suite for ContentService.

System role: Verification of FIL/attoFIL conversion around the content registry
"""

import pytest

from base0.application.services.content_service import ContentService
from base0.boundary.chain.memory_registry import InMemoryContentRegistry
from base0.core.exceptions import ContentAccessError, ValidationError
from base0.models.content import (
    PurchaseAccessRequest,
    RecordDealRequest,
    StoreContentRequest,
    format_fil,
    parse_fil,
)

OWNER = "0x1111111111111111111111111111111111111111"
BUYER = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def registry() -> InMemoryContentRegistry:
    return InMemoryContentRegistry()


@pytest.fixture
def service(registry: InMemoryContentRegistry) -> ContentService:
    return ContentService(registry)


async def create(service: ContentService, price: str = "0.01") -> int:
    created = await service.store_content(
        StoreContentRequest(
            owner=OWNER,
            piece_cid="baga6ea4seaqpiece",
            data_cid="bafybeidata",
            price=price,
            title="Sunset prompts",
            piece_size=1024,
        )
    )
    return created.content_id


class TestFilAmounts:
    def test_parse_fil(self) -> None:
        assert parse_fil("0.01") == 10**16
        assert parse_fil(1) == 10**18

    def test_parse_fil_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            parse_fil("ten")
        with pytest.raises(ValueError):
            parse_fil("-1")

    def test_format_fil(self) -> None:
        assert format_fil(10**16) == "0.01"
        assert format_fil(2 * 10**18) == "2.0"

    def test_store_request_validates_price(self) -> None:
        with pytest.raises(ValueError):
            StoreContentRequest(
                owner=OWNER, pieceCid="p", dataCid="d", price="abc", title="t", pieceSize=1
            )


class TestContentService:
    @pytest.mark.asyncio
    async def test_store_and_read_back_in_fil(self, service: ContentService) -> None:
        content_id = await create(service)

        content = await service.get_content(content_id, BUYER)

        assert content.price == "0.01"
        assert content.user_has_access is False
        assert content.model_dump(by_alias=True)["pieceSize"] == 1024

    @pytest.mark.asyncio
    async def test_purchase_defaults_to_listed_price(
        self, service: ContentService, registry: InMemoryContentRegistry
    ) -> None:
        """Test omitting the value pays exactly the listed price."""
        # Arrange
        content_id = await create(service)

        # Act
        receipt = await service.purchase_access(content_id, PurchaseAccessRequest(buyer=BUYER))

        # Assert
        assert receipt["contentId"] == content_id
        assert receipt["accessDays"] == 365
        assert registry.platform_balance == 5 * 10**14
        cid = await service.get_cid(content_id, BUYER)
        assert cid.data_cid == "bafybeidata"

    @pytest.mark.asyncio
    async def test_explicit_wrong_value(self, service: ContentService) -> None:
        content_id = await create(service)

        with pytest.raises(ValidationError, match="Incorrect payment amount"):
            await service.purchase_access(content_id, PurchaseAccessRequest(buyer=BUYER, value="0.02"))

    @pytest.mark.asyncio
    async def test_unparseable_value(self, service: ContentService) -> None:
        content_id = await create(service)

        with pytest.raises(ValidationError) as exc_info:
            await service.purchase_access(content_id, PurchaseAccessRequest(buyer=BUYER, value="lots"))

        assert exc_info.value.details["field"] == "value"

    @pytest.mark.asyncio
    async def test_cid_requires_purchase(self, service: ContentService) -> None:
        content_id = await create(service)

        with pytest.raises(ContentAccessError):
            await service.get_cid(content_id, BUYER)

    @pytest.mark.asyncio
    async def test_deal_status(self, service: ContentService) -> None:
        content_id = await create(service)

        status = await service.record_deal(content_id, RecordDealRequest(dealId=7, active=True), OWNER)

        assert status.deal_id == 7
        assert status.active is True
        assert (await service.get_deal_status(content_id)).active is True

    @pytest.mark.asyncio
    async def test_deactivate_hides_from_marketplace(self, service: ContentService) -> None:
        content_id = await create(service)
        await create(service, price="1")

        updated = await service.set_active(content_id, False, OWNER)

        assert updated.is_active is False
        assert [c.id for c in await service.list_active()] == [content_id + 1]
        assert len(await service.list_owned(OWNER)) == 2

    @pytest.mark.asyncio
    async def test_purchased_listing(self, service: ContentService) -> None:
        content_id = await create(service)
        await service.purchase_access(content_id, PurchaseAccessRequest(buyer=BUYER))

        purchased = await service.list_purchased(BUYER)

        assert [c.id for c in purchased] == [content_id]
        assert purchased[0].user_has_access is True
        assert await service.platform_fee_percentage() == 5
