"""
FilecoinCIDStore contract wrapper.

web3.py is synchronous, so every RPC round trip runs in a worker thread.
Transactions are signed locally with an eth_account key and awaited for a
receipt before returning.

Dependencies: web3, eth_account
System role: On-chain content registry backend
"""

import asyncio
import logging
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError

from base0.boundary.chain.abi import CID_STORE_ABI
from base0.boundary.chain.registry import ACCESS_EXPIRED, PURCHASE_REQUIRED
from base0.core.exceptions import (
    ConfigurationError,
    ContentAccessError,
    PaymentError,
    StorageError,
    ValidationError,
)
from base0.models.content import ContentCreatedResponse, StoredContent

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT_SECONDS = 180


def piece_cid_bytes(piece_cid: str) -> bytes:
    """Contract stores the piece CID as opaque bytes."""
    return piece_cid.encode("utf-8")


class Web3ContentRegistry:
    """
    ContentRegistry backed by a deployed FilecoinCIDStore.

    Args:
        rpc_url: Filecoin JSON-RPC endpoint
        contract_address: Deployed contract address
        private_key: Key that signs transactions; reads work without it
        w3: Optional pre-built Web3 instance (tests)
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        private_key: str | None = None,
        w3: Web3 | None = None,
    ) -> None:
        if not contract_address:
            raise ConfigurationError("FilecoinCIDStore contract address not configured")
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self.contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=CID_STORE_ABI,
        )
        self.account: LocalAccount | None = Account.from_key(private_key) if private_key else None

    def _signer_for(self, caller: str) -> LocalAccount:
        if self.account is None:
            raise ConfigurationError("No signer key configured for registry transactions")
        if self.account.address.lower() != caller.lower():
            raise ValidationError(
                "Caller does not match the configured signer",
                details={"caller": caller, "signer": self.account.address},
            )
        return self.account

    def _transact(self, function: Any, account: LocalAccount, value: int = 0) -> dict:
        tx = function.build_transaction(
            {
                "from": account.address,
                "nonce": self.w3.eth.get_transaction_count(account.address),
                "value": value,
            }
        )
        signed = account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT_SECONDS)
        if receipt["status"] != 1:
            raise PaymentError(
                f"contract reverted: transaction {Web3.to_hex(tx_hash)} failed",
                stage="transaction",
            )
        return receipt

    async def _run(self, fn, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except ContractLogicError as e:
            message = str(e)
            logger.warning(f"{__name__}:_run - Contract reverted: {message}")
            if PURCHASE_REQUIRED in message:
                raise ContentAccessError(PURCHASE_REQUIRED) from e
            if ACCESS_EXPIRED in message:
                raise ContentAccessError(ACCESS_EXPIRED) from e
            raise ValidationError(message) from e
        except (ConfigurationError, ValidationError, PaymentError):
            raise
        except Exception as e:
            logger.error(f"{__name__}:_run - RPC call failed: {e}", exc_info=True)
            raise StorageError(f"Registry call failed: {e}") from e

    def _content_from_tuple(self, content_id: int, info: tuple) -> StoredContent:
        title, description, price, owner, is_active, created_at, deal_id, piece_size, has_access = info
        return StoredContent(
            id=content_id,
            title=title,
            description=description,
            price=int(price),
            owner=owner,
            is_active=bool(is_active),
            created_at=int(created_at),
            deal_id=int(deal_id),
            piece_size=int(piece_size),
            user_has_access=bool(has_access),
        )

    def _call_opts(self, caller: str | None) -> dict:
        return {"from": Web3.to_checksum_address(caller)} if caller else {}

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
        account = self._signer_for(owner)
        function = self.contract.functions.storeContent(
            piece_cid_bytes(piece_cid), data_cid, price, title, description, piece_size
        )
        receipt = await self._run(self._transact, function, account)

        events = self.contract.events.ContentStored().process_receipt(receipt)
        if not events:
            raise StorageError("Content ID not found in transaction receipt")
        content_id = int(events[0]["args"]["contentId"])
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        logger.info(f"{__name__}:store_content - Stored content {content_id} tx={tx_hash}")
        return ContentCreatedResponse(content_id=content_id, tx_hash=tx_hash)

    async def purchase_access(self, content_id: int, buyer: str, value: int) -> str | None:
        account = self._signer_for(buyer)
        function = self.contract.functions.purchaseAccess(content_id)
        receipt = await self._run(self._transact, function, account, value)
        return Web3.to_hex(receipt["transactionHash"])

    async def get_cid(self, content_id: int, caller: str) -> str:
        return await self._run(
            self.contract.functions.getCID(content_id).call, self._call_opts(caller)
        )

    async def get_content_info(self, content_id: int, caller: str | None = None) -> StoredContent:
        info = await self._run(
            self.contract.functions.getContentInfo(content_id).call, self._call_opts(caller)
        )
        return self._content_from_tuple(content_id, info)

    async def _contents(self, ids: list[int], caller: str | None) -> list[StoredContent]:
        return list(await asyncio.gather(*(self.get_content_info(int(i), caller) for i in ids)))

    async def get_all_active_content(self, caller: str | None = None) -> list[StoredContent]:
        ids = await self._run(self.contract.functions.getAllActiveContent().call)
        return await self._contents(ids, caller)

    async def get_user_owned_content(self, user: str) -> list[StoredContent]:
        address = Web3.to_checksum_address(user)
        ids = await self._run(self.contract.functions.getUserOwnedContent(address).call)
        return await self._contents(ids, user)

    async def get_user_purchased_content(self, user: str) -> list[StoredContent]:
        address = Web3.to_checksum_address(user)
        ids = await self._run(self.contract.functions.getUserPurchasedContent(address).call)
        return await self._contents(ids, user)

    async def has_access(self, content_id: int, user: str) -> bool:
        address = Web3.to_checksum_address(user)
        return await self._run(self.contract.functions.hasAccess(content_id, address).call)

    async def check_deal_activation(self, content_id: int) -> bool:
        return await self._run(self.contract.functions.checkDealActivation(content_id).call)

    async def platform_fee_percentage(self) -> int:
        return int(await self._run(self.contract.functions.platform_fee_percentage().call))

    async def record_deal(self, content_id: int, deal_id: int, active: bool, caller: str) -> None:
        account = self._signer_for(caller)
        function = self.contract.functions.updateDeal(content_id, deal_id, active)
        await self._run(self._transact, function, account)

    async def set_active(self, content_id: int, active: bool, caller: str) -> None:
        account = self._signer_for(caller)
        function = self.contract.functions.setContentActive(content_id, active)
        await self._run(self._transact, function, account)
