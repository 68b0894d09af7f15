"""
Storage backend contract.

A backend is bound to one wallet and exposes the handful of Synapse
operations the payment pipeline needs. Transaction methods return only after
the transaction is confirmed.

Dependencies: typing
System role: Interface between the storage pipeline and Filecoin storage
"""

from typing import Protocol

from base0.models.storage import (
    AccountInfo,
    PreflightInfo,
    ServiceApproval,
    TransactionReceipt,
    UploadResult,
)

DEFAULT_TOKEN = "USDFC"


class StorageBackend(Protocol):
    """Wallet-bound storage and payment operations."""

    wallet_address: str
    service_address: str

    async def preflight_upload(self, size: int) -> PreflightInfo: ...

    async def get_account_info(self, address: str | None = None) -> AccountInfo: ...

    async def get_service_approval(self, service: str) -> ServiceApproval | None: ...

    async def deposit(self, amount: int, token: str = DEFAULT_TOKEN) -> TransactionReceipt: ...

    async def approve_service(
        self,
        service: str,
        rate_allowance: int,
        lockup_allowance: int,
        max_lockup_period: int,
    ) -> TransactionReceipt: ...

    async def upload(self, data: bytes) -> UploadResult: ...

    async def download(self, piece_cid: str) -> bytes: ...
