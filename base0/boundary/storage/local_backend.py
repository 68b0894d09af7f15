"""
In-process storage backend.

Keeps wallet token balances, payment-contract accounts, service approvals and
uploaded blobs in memory so the whole storage flow runs without a Filecoin
node. Content identifiers are CIDv1 (raw codec, sha256) strings, not piece
commitments.

Dependencies: hashlib, base64, secrets
System role: Development and test storage backend
"""

import base64
import hashlib
import logging
import secrets
from dataclasses import dataclass, field

from base0.boundary.storage.backend import DEFAULT_TOKEN
from base0.core.exceptions import NotFoundError, PaymentError
from base0.models.storage import (
    AccountInfo,
    PreflightInfo,
    ServiceApproval,
    StorageCosts,
    TransactionReceipt,
    UploadResult,
)

logger = logging.getLogger(__name__)

TIB = 1024**4
DAYS_PER_MONTH = 30
# Synapse locks funds for this many days of the active rate
LOCKUP_DAYS = 10


def raw_cid(data: bytes) -> str:
    """CIDv1, raw codec, sha2-256 multihash, base32 multibase."""
    digest = hashlib.sha256(data).digest()
    prefix = bytes([0x01, 0x55, 0x12, 0x20])
    return "b" + base64.b32encode(prefix + digest).decode("ascii").lower().rstrip("=")


@dataclass
class Approval:
    rate_allowance: int
    lockup_allowance: int
    max_lockup_period: int


@dataclass
class PaymentAccount:
    funds: int = 0
    lockup_rate: int = 0


@dataclass
class LocalLedger:
    """
    Shared state behind every LocalStorageBackend.

    Attributes:
        initial_token_balance: USDFC credited to a wallet the first time it is seen
        price_per_tib_month: Storage price in token base units per TiB per month
        epochs_per_day: Filecoin epochs per day
    """

    initial_token_balance: int = 100 * 10**18
    price_per_tib_month: int = 2 * 10**18
    epochs_per_day: int = 2880
    token_balances: dict[str, int] = field(default_factory=dict)
    accounts: dict[str, PaymentAccount] = field(default_factory=dict)
    approvals: dict[tuple[str, str], Approval] = field(default_factory=dict)
    blobs: dict[str, bytes] = field(default_factory=dict)
    block_number: int = 0

    def token_balance(self, address: str) -> int:
        key = address.lower()
        if key not in self.token_balances:
            self.token_balances[key] = self.initial_token_balance
        return self.token_balances[key]

    def set_token_balance(self, address: str, amount: int) -> None:
        self.token_balances[address.lower()] = amount

    def account(self, address: str) -> PaymentAccount:
        return self.accounts.setdefault(address.lower(), PaymentAccount())

    def costs_for(self, size: int) -> StorageCosts:
        """Linear price: per-epoch rate rounded up so any non-empty upload costs something."""
        epochs_per_month = self.epochs_per_day * DAYS_PER_MONTH
        numerator = size * self.price_per_tib_month
        denominator = TIB * epochs_per_month
        per_epoch = -(-numerator // denominator) if size else 0
        per_day = per_epoch * self.epochs_per_day
        return StorageCosts(per_epoch=per_epoch, per_day=per_day, per_month=per_day * DAYS_PER_MONTH)

    def next_receipt(self) -> TransactionReceipt:
        self.block_number += 1
        return TransactionReceipt(
            tx_hash="0x" + secrets.token_hex(32),
            status=1,
            block_number=self.block_number,
        )


class LocalStorageBackend:
    """
    StorageBackend over a LocalLedger, bound to one wallet.

    Args:
        ledger: Shared in-memory state
        wallet_address: Wallet paying for and uploading data
        service_address: Storage service that gets approved to spend funds
    """

    def __init__(self, ledger: LocalLedger, wallet_address: str, service_address: str) -> None:
        self.ledger = ledger
        self.wallet_address = wallet_address
        self.service_address = service_address

    def _lockup_days_cost(self, rate: int) -> int:
        return rate * self.ledger.epochs_per_day * LOCKUP_DAYS

    def _allowance_check(self, costs: StorageCosts) -> tuple[bool, str]:
        account = self.ledger.account(self.wallet_address)
        approval = self.ledger.approvals.get(
            (self.wallet_address.lower(), self.service_address.lower())
        )
        if approval is None:
            return False, "Storage service not approved"

        new_rate = account.lockup_rate + costs.per_epoch
        if approval.rate_allowance < new_rate:
            return False, "Rate allowance insufficient"
        if approval.lockup_allowance < self._lockup_days_cost(new_rate):
            return False, "Lockup allowance insufficient"

        available = account.funds - self._lockup_days_cost(account.lockup_rate)
        if available < self._lockup_days_cost(costs.per_epoch):
            return False, "Insufficient deposited funds"
        return True, "Sufficient balance available"

    async def preflight_upload(self, size: int) -> PreflightInfo:
        costs = self.ledger.costs_for(size)
        sufficient, message = self._allowance_check(costs)
        return PreflightInfo(estimated_cost=costs, allowance_sufficient=sufficient, message=message)

    async def get_account_info(self, address: str | None = None) -> AccountInfo:
        account = self.ledger.account(address or self.wallet_address)
        locked = self._lockup_days_cost(account.lockup_rate)
        return AccountInfo(
            funds=account.funds,
            available_funds=max(account.funds - locked, 0),
            lockup_rate=account.lockup_rate,
        )

    async def get_service_approval(self, service: str) -> ServiceApproval | None:
        approval = self.ledger.approvals.get((self.wallet_address.lower(), service.lower()))
        if approval is None:
            return None
        return ServiceApproval(
            rate_allowance=approval.rate_allowance,
            lockup_allowance=approval.lockup_allowance,
            max_lockup_period=approval.max_lockup_period,
        )

    async def deposit(self, amount: int, token: str = DEFAULT_TOKEN) -> TransactionReceipt:
        if token != DEFAULT_TOKEN:
            raise PaymentError(f"Unsupported token: {token}", stage="deposit")
        balance = self.ledger.token_balance(self.wallet_address)
        if balance < amount:
            raise PaymentError(
                f"contract reverted: insufficient {token} balance",
                stage="deposit",
                details={"balance": str(balance), "required": str(amount)},
            )

        self.ledger.set_token_balance(self.wallet_address, balance - amount)
        self.ledger.account(self.wallet_address).funds += amount
        receipt = self.ledger.next_receipt()
        logger.info(
            f"{__name__}:deposit - Deposited {amount} {token} for {self.wallet_address} "
            f"tx={receipt.tx_hash}"
        )
        return receipt

    async def approve_service(
        self,
        service: str,
        rate_allowance: int,
        lockup_allowance: int,
        max_lockup_period: int,
    ) -> TransactionReceipt:
        self.ledger.approvals[(self.wallet_address.lower(), service.lower())] = Approval(
            rate_allowance=rate_allowance,
            lockup_allowance=lockup_allowance,
            max_lockup_period=max_lockup_period,
        )
        receipt = self.ledger.next_receipt()
        logger.info(
            f"{__name__}:approve_service - Approved {service} rate={rate_allowance} "
            f"lockup={lockup_allowance} tx={receipt.tx_hash}"
        )
        return receipt

    async def upload(self, data: bytes) -> UploadResult:
        costs = self.ledger.costs_for(len(data))
        sufficient, message = self._allowance_check(costs)
        if not sufficient:
            raise PaymentError(f"Failed to create data set: {message}", stage="upload")

        self.ledger.account(self.wallet_address).lockup_rate += costs.per_epoch
        cid = raw_cid(data)
        self.ledger.blobs[cid] = bytes(data)
        logger.info(f"{__name__}:upload - Stored {len(data)} bytes as {cid}")
        return UploadResult(piece_cid=cid, size=len(data))

    async def download(self, piece_cid: str) -> bytes:
        try:
            return self.ledger.blobs[piece_cid]
        except KeyError:
            raise NotFoundError(f"Piece not found: {piece_cid}") from None
