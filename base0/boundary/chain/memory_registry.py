"""
In-memory content registry.

Reference semantics of the FilecoinCIDStore contract, used for development,
tests and whenever no contract address is configured.

Dependencies: time
System role: Content registry backend
"""

import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Callable

from base0.boundary.chain.registry import (
    ACCESS_DURATION_SECONDS,
    ACCESS_EXPIRED,
    PLATFORM_FEE_PERCENTAGE,
    PURCHASE_REQUIRED,
)
from base0.core.exceptions import ContentAccessError, NotFoundError, ValidationError
from base0.models.content import ContentCreatedResponse, StoredContent

logger = logging.getLogger(__name__)


@dataclass
class ContentRecord:
    id: int
    owner: str
    piece_cid: str
    data_cid: str
    price: int
    title: str
    description: str
    piece_size: int
    created_at: int
    is_active: bool = True
    deal_id: int = 0
    deal_active: bool = False


@dataclass
class _Ledger:
    access_expiry: dict[tuple[int, str], int] = field(default_factory=dict)
    purchased: dict[str, list[int]] = field(default_factory=dict)
    owner_balances: dict[str, int] = field(default_factory=dict)
    platform_balance: int = 0


def _key(address: str) -> str:
    return address.lower()


class InMemoryContentRegistry:
    """
    ContentRegistry held in process memory.

    Args:
        clock: Returns the current unix time in seconds
        fee_percentage: Platform fee retained from each purchase
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        fee_percentage: int = PLATFORM_FEE_PERCENTAGE,
    ) -> None:
        self._clock = clock
        self._fee_percentage = fee_percentage
        self._contents: dict[int, ContentRecord] = {}
        self._next_id = 1
        self._ledger = _Ledger()

    def _now(self) -> int:
        return int(self._clock())

    def _record(self, content_id: int) -> ContentRecord:
        record = self._contents.get(content_id)
        if record is None:
            raise NotFoundError(f"Content {content_id} does not exist")
        return record

    def _require_owner(self, record: ContentRecord, caller: str) -> None:
        if _key(record.owner) != _key(caller):
            raise ContentAccessError("Only content owner can perform this action", record.id)

    def _has_access(self, record: ContentRecord, user: str) -> bool:
        if _key(record.owner) == _key(user):
            return True
        expiry = self._ledger.access_expiry.get((record.id, _key(user)))
        return expiry is not None and self._now() < expiry

    def _to_content(self, record: ContentRecord, caller: str | None) -> StoredContent:
        return StoredContent(
            id=record.id,
            title=record.title,
            description=record.description,
            price=record.price,
            owner=record.owner,
            is_active=record.is_active,
            created_at=record.created_at,
            deal_id=record.deal_id,
            piece_size=record.piece_size,
            user_has_access=bool(caller) and self._has_access(record, caller),
        )

    async def store_content(
        self,
        owner: str,
        piece_cid: str,
        data_cid: str,
        price: int,
        title: str,
        description: str,
        piece_size: int,
    ) -> ContentCreatedResponse:
        if not piece_cid:
            raise ValidationError("Piece CID cannot be empty", field="pieceCid")
        if not data_cid:
            raise ValidationError("Data CID cannot be empty", field="dataCid")
        if price <= 0:
            raise ValidationError("Price must be greater than 0", field="price")

        content_id = self._next_id
        self._next_id += 1
        self._contents[content_id] = ContentRecord(
            id=content_id,
            owner=owner,
            piece_cid=piece_cid,
            data_cid=data_cid,
            price=price,
            title=title,
            description=description,
            piece_size=piece_size,
            created_at=self._now(),
        )
        logger.info(f"{__name__}:store_content - Stored content {content_id} for {owner}")
        return ContentCreatedResponse(content_id=content_id, tx_hash=None)

    async def purchase_access(self, content_id: int, buyer: str, value: int) -> str | None:
        record = self._record(content_id)
        if not record.is_active:
            raise ValidationError("Content not active", details={"content_id": content_id})
        if _key(record.owner) == _key(buyer):
            raise ValidationError("Owner already has access", details={"content_id": content_id})
        if value != record.price:
            raise ValidationError(
                "Incorrect payment amount",
                details={"content_id": content_id, "expected": str(record.price), "received": str(value)},
            )

        fee = record.price * self._fee_percentage // 100
        self._ledger.platform_balance += fee
        owner_key = _key(record.owner)
        self._ledger.owner_balances[owner_key] = (
            self._ledger.owner_balances.get(owner_key, 0) + record.price - fee
        )

        buyer_key = _key(buyer)
        self._ledger.access_expiry[(content_id, buyer_key)] = self._now() + ACCESS_DURATION_SECONDS
        purchased = self._ledger.purchased.setdefault(buyer_key, [])
        if content_id not in purchased:
            purchased.append(content_id)

        logger.info(f"{__name__}:purchase_access - {buyer} purchased content {content_id}")
        return "0x" + secrets.token_hex(32)

    async def get_cid(self, content_id: int, caller: str) -> str:
        record = self._record(content_id)
        if _key(record.owner) == _key(caller):
            return record.data_cid

        expiry = self._ledger.access_expiry.get((content_id, _key(caller)))
        if expiry is None:
            raise ContentAccessError(PURCHASE_REQUIRED, content_id)
        if self._now() >= expiry:
            raise ContentAccessError(ACCESS_EXPIRED, content_id)
        return record.data_cid

    async def get_content_info(self, content_id: int, caller: str | None = None) -> StoredContent:
        return self._to_content(self._record(content_id), caller)

    async def get_all_active_content(self, caller: str | None = None) -> list[StoredContent]:
        return [
            self._to_content(record, caller)
            for record in self._contents.values()
            if record.is_active
        ]

    async def get_user_owned_content(self, user: str) -> list[StoredContent]:
        return [
            self._to_content(record, user)
            for record in self._contents.values()
            if _key(record.owner) == _key(user)
        ]

    async def get_user_purchased_content(self, user: str) -> list[StoredContent]:
        ids = self._ledger.purchased.get(_key(user), [])
        return [self._to_content(self._contents[content_id], user) for content_id in ids]

    async def has_access(self, content_id: int, user: str) -> bool:
        return self._has_access(self._record(content_id), user)

    async def check_deal_activation(self, content_id: int) -> bool:
        record = self._record(content_id)
        return record.deal_id > 0 and record.deal_active

    async def platform_fee_percentage(self) -> int:
        return self._fee_percentage

    async def record_deal(self, content_id: int, deal_id: int, active: bool, caller: str) -> None:
        record = self._record(content_id)
        self._require_owner(record, caller)
        record.deal_id = deal_id
        record.deal_active = active

    async def set_active(self, content_id: int, active: bool, caller: str) -> None:
        record = self._record(content_id)
        self._require_owner(record, caller)
        record.is_active = active

    def owner_balance(self, owner: str) -> int:
        """Proceeds credited to an owner, net of the platform fee."""
        return self._ledger.owner_balances.get(_key(owner), 0)

    @property
    def platform_balance(self) -> int:
        return self._ledger.platform_balance
