"""
Synapse storage gateway client.

Talks to an HTTP sidecar that wraps the Synapse SDK. The sidecar signs with
the wallet it is configured for and answers transaction endpoints only once
the transaction is confirmed. Amounts travel as decimal strings.

Dependencies: httpx
System role: Filecoin storage backend over HTTP
"""

import logging
from typing import Any

import httpx

from base0.boundary.storage.backend import DEFAULT_TOKEN
from base0.core.exceptions import NotFoundError, PaymentError, StorageError
from base0.models.storage import (
    AccountInfo,
    PreflightInfo,
    ServiceApproval,
    StorageCosts,
    TransactionReceipt,
    UploadResult,
)

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = {402, 409}
REVERT_MARKERS = ("revert", "insufficient", "failed to create data set")


class SynapseGatewayClient:
    """
    StorageBackend implementation backed by a Synapse gateway.

    Args:
        base_url: Gateway base URL
        wallet_address: Wallet the gateway acts for
        service_address: Warm storage service address
        with_cdn: Request CDN-backed storage
        timeout: Request timeout in seconds (uploads wait for confirmation)
        transport: Optional httpx transport (tests use MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        wallet_address: str,
        service_address: str,
        with_cdn: bool = False,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.wallet_address = wallet_address
        self.service_address = service_address
        self.with_cdn = with_cdn
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"X-Wallet-Address": self.wallet_address},
        )

    async def _request(self, method: str, path: str, stage: str, **kwargs) -> httpx.Response:
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.RequestError as e:
                logger.error(f"{__name__}:_request - Failed to connect to gateway: {e}")
                raise StorageError(
                    f"Failed to connect to storage gateway: {e}",
                    details={"stage": stage},
                ) from e

        if response.is_success:
            return response

        body = response.text
        logger.error(f"{__name__}:_request - Gateway error {response.status_code} at {stage}: {body[:200]}")
        if response.status_code in PAYMENT_STATUSES or any(
            marker in body.lower() for marker in REVERT_MARKERS
        ):
            raise PaymentError(_error_message(response), stage=stage)
        if response.status_code == 404:
            raise NotFoundError(_error_message(response), details={"stage": stage})
        raise StorageError(
            f"Storage gateway error: {response.status_code}",
            details={"stage": stage, "body": body},
        )

    async def preflight_upload(self, size: int) -> PreflightInfo:
        response = await self._request(
            "POST",
            "/storage/preflight",
            stage="preflight",
            json={"size": size, "withCDN": self.with_cdn},
        )
        payload = response.json()
        cost = payload["estimatedCost"]
        allowance = payload.get("allowanceCheck", {})
        return PreflightInfo(
            estimated_cost=StorageCosts(
                per_epoch=int(cost["perEpoch"]),
                per_day=int(cost["perDay"]),
                per_month=int(cost["perMonth"]),
            ),
            allowance_sufficient=bool(allowance.get("sufficient", False)),
            message=allowance.get("message", ""),
        )

    async def get_account_info(self, address: str | None = None) -> AccountInfo:
        target = address or self.wallet_address
        response = await self._request("GET", f"/payments/accounts/{target}", stage="account")
        payload = response.json()
        return AccountInfo(
            funds=int(payload.get("funds", 0)),
            available_funds=int(payload.get("availableFunds", 0)),
            lockup_rate=int(payload.get("lockupRate", 0)),
        )

    async def get_service_approval(self, service: str) -> ServiceApproval | None:
        """Current approval of `service`, or None when the wallet never approved it."""
        try:
            response = await self._request("GET", f"/payments/approvals/{service}", stage="approval")
        except NotFoundError:
            return None
        payload = response.json()
        if not payload.get("isApproved", True):
            return None
        return ServiceApproval(
            rate_allowance=int(payload.get("rateAllowance", 0)),
            lockup_allowance=int(payload.get("lockupAllowance", 0)),
            max_lockup_period=int(payload.get("maxLockupPeriod", 0)),
        )

    async def deposit(self, amount: int, token: str = DEFAULT_TOKEN) -> TransactionReceipt:
        response = await self._request(
            "POST",
            "/payments/deposit",
            stage="deposit",
            json={"amount": str(amount), "token": token},
        )
        return _receipt(response.json(), stage="deposit")

    async def approve_service(
        self,
        service: str,
        rate_allowance: int,
        lockup_allowance: int,
        max_lockup_period: int,
    ) -> TransactionReceipt:
        response = await self._request(
            "POST",
            "/payments/approve-service",
            stage="approval",
            json={
                "service": service,
                "rateAllowance": str(rate_allowance),
                "lockupAllowance": str(lockup_allowance),
                "maxLockupPeriod": str(max_lockup_period),
            },
        )
        return _receipt(response.json(), stage="approval")

    async def upload(self, data: bytes) -> UploadResult:
        response = await self._request(
            "POST",
            "/storage/upload",
            stage="upload",
            content=data,
            headers={"Content-Type": "application/octet-stream"},
            params={"withCDN": str(self.with_cdn).lower()},
        )
        payload = response.json()
        piece_cid = payload.get("pieceCid")
        if not piece_cid:
            raise StorageError("Storage gateway did not return a piece CID")
        return UploadResult(piece_cid=piece_cid, size=int(payload.get("size", len(data))))

    async def download(self, piece_cid: str) -> bytes:
        response = await self._request(
            "GET",
            f"/storage/download/{piece_cid}",
            stage="download",
            params={"withCDN": str(self.with_cdn).lower()},
        )
        return response.content


def _error_message(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        return str(payload.get("error") or payload.get("message") or payload)
    return str(payload)


def _receipt(payload: dict, stage: str) -> TransactionReceipt:
    receipt = TransactionReceipt(
        tx_hash=payload["txHash"],
        status=int(payload.get("status", 1)),
        block_number=payload.get("blockNumber"),
    )
    if receipt.status != 1:
        raise PaymentError(f"contract reverted: transaction {receipt.tx_hash} failed", stage=stage)
    return receipt
