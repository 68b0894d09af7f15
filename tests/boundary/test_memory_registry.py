"""
Test suite for the in-memory content registry.

Exercises purchase accounting, access windows and owner-only mutations with
a controllable clock.

System role: Verification of pay-to-unlock semantics
"""

import pytest

from base0.boundary.chain.memory_registry import InMemoryContentRegistry
from base0.boundary.chain.registry import ACCESS_DURATION_SECONDS, ACCESS_EXPIRED, PURCHASE_REQUIRED
from base0.core.exceptions import ContentAccessError, NotFoundError, ValidationError

OWNER = "0xAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAaAa"
BUYER = "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"
PRICE = 10**16


class Clock:
    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def registry(clock: Clock) -> InMemoryContentRegistry:
    return InMemoryContentRegistry(clock=clock)


async def store(registry: InMemoryContentRegistry, price: int = PRICE) -> int:
    created = await registry.store_content(
        owner=OWNER,
        piece_cid="baga6ea4seaq",
        data_cid="bafybeidata",
        price=price,
        title="Prompt pack",
        description="Ten prompts",
        piece_size=2048,
    )
    return created.content_id


class TestStoreContent:
    @pytest.mark.asyncio
    async def test_ids_are_sequential(self, registry: InMemoryContentRegistry) -> None:
        assert await store(registry) == 1
        assert await store(registry) == 2

    @pytest.mark.asyncio
    async def test_zero_price_rejected(self, registry: InMemoryContentRegistry) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store(registry, price=0)

        assert exc_info.value.message == "Price must be greater than 0"

    @pytest.mark.asyncio
    async def test_content_info_hides_cids(self, registry: InMemoryContentRegistry, clock: Clock) -> None:
        content_id = await store(registry)

        info = await registry.get_content_info(content_id, BUYER)

        assert info.created_at == int(clock.now)
        assert info.user_has_access is False
        assert "data_cid" not in info.model_dump()


class TestPurchaseAccess:
    """Purchases pay the exact price and unlock the data CID for 365 days."""

    @pytest.mark.asyncio
    async def test_purchase_splits_fee_and_grants_access(self, registry: InMemoryContentRegistry) -> None:
        # Arrange
        content_id = await store(registry)

        # Act
        tx_hash = await registry.purchase_access(content_id, BUYER, PRICE)

        # Assert
        assert tx_hash.startswith("0x")
        assert registry.platform_balance == PRICE * 5 // 100
        assert registry.owner_balance(OWNER) == PRICE - PRICE * 5 // 100
        assert await registry.get_cid(content_id, BUYER) == "bafybeidata"
        assert await registry.has_access(content_id, BUYER.lower())
        purchased = await registry.get_user_purchased_content(BUYER)
        assert [c.id for c in purchased] == [content_id]

    @pytest.mark.asyncio
    async def test_wrong_amount_rejected(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        with pytest.raises(ValidationError) as exc_info:
            await registry.purchase_access(content_id, BUYER, PRICE + 1)

        assert exc_info.value.message == "Incorrect payment amount"
        assert registry.platform_balance == 0

    @pytest.mark.asyncio
    async def test_owner_cannot_purchase(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        with pytest.raises(ValidationError, match="Owner already has access"):
            await registry.purchase_access(content_id, OWNER.lower(), PRICE)

    @pytest.mark.asyncio
    async def test_inactive_content_cannot_be_purchased(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)
        await registry.set_active(content_id, False, OWNER)

        with pytest.raises(ValidationError, match="Content not active"):
            await registry.purchase_access(content_id, BUYER, PRICE)

        assert await registry.get_all_active_content() == []

    @pytest.mark.asyncio
    async def test_unknown_content(self, registry: InMemoryContentRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.purchase_access(99, BUYER, PRICE)

    @pytest.mark.asyncio
    async def test_repurchase_is_listed_once(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        await registry.purchase_access(content_id, BUYER, PRICE)
        await registry.purchase_access(content_id, BUYER, PRICE)

        assert len(await registry.get_user_purchased_content(BUYER)) == 1


class TestGetCid:
    @pytest.mark.asyncio
    async def test_owner_always_has_access(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        assert await registry.get_cid(content_id, OWNER) == "bafybeidata"

    @pytest.mark.asyncio
    async def test_purchase_required(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        with pytest.raises(ContentAccessError) as exc_info:
            await registry.get_cid(content_id, BUYER)

        assert exc_info.value.message == PURCHASE_REQUIRED
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_access_expires_after_365_days(self, registry: InMemoryContentRegistry, clock: Clock) -> None:
        """Test access ends exactly at purchase time plus the access window."""
        # Arrange
        content_id = await store(registry)
        await registry.purchase_access(content_id, BUYER, PRICE)

        # Act
        clock.now += ACCESS_DURATION_SECONDS - 1
        still_valid = await registry.get_cid(content_id, BUYER)
        clock.now += 1

        # Assert
        assert still_valid == "bafybeidata"
        with pytest.raises(ContentAccessError) as exc_info:
            await registry.get_cid(content_id, BUYER)
        assert exc_info.value.message == ACCESS_EXPIRED
        assert await registry.has_access(content_id, BUYER) is False


class TestOwnerOperations:
    @pytest.mark.asyncio
    async def test_record_deal(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)
        assert await registry.check_deal_activation(content_id) is False

        await registry.record_deal(content_id, 42, True, OWNER)

        assert await registry.check_deal_activation(content_id) is True
        assert (await registry.get_content_info(content_id)).deal_id == 42

    @pytest.mark.asyncio
    async def test_non_owner_cannot_modify(self, registry: InMemoryContentRegistry) -> None:
        content_id = await store(registry)

        with pytest.raises(ContentAccessError, match="Only content owner"):
            await registry.set_active(content_id, False, BUYER)
        with pytest.raises(ContentAccessError):
            await registry.record_deal(content_id, 1, True, BUYER)

    @pytest.mark.asyncio
    async def test_owned_content_listing(self, registry: InMemoryContentRegistry) -> None:
        await store(registry)
        await store(registry)

        owned = await registry.get_user_owned_content(OWNER.lower())

        assert [c.id for c in owned] == [1, 2]
        assert all(c.user_has_access for c in owned)
        assert await registry.platform_fee_percentage() == 5
