"""
Storage and payment pipeline models.

Token amounts are integers in base units (18 decimals) end to end; the API
serializes them as strings so JavaScript clients do not lose precision.

Dependencies: pydantic
System role: Storage/payment pipeline data contracts
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from base0.models.common import CamelModel


class StorageCosts(CamelModel):
    """Estimated storage cost at three granularities."""

    per_epoch: int
    per_day: int
    per_month: int

    def scaled(self, multiplier: int) -> "StorageCosts":
        return StorageCosts(
            per_epoch=self.per_epoch * multiplier,
            per_day=self.per_day * multiplier,
            per_month=self.per_month * multiplier,
        )

    @field_serializer("per_epoch", "per_day", "per_month", when_used="json")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class PreflightInfo(CamelModel):
    """Storage backend answer to "what would uploading N bytes cost?"."""

    estimated_cost: StorageCosts
    allowance_sufficient: bool = True
    message: str = ""


class AccountInfo(CamelModel):
    """Payment-contract account state for one wallet."""

    funds: int = 0
    available_funds: int = 0
    lockup_rate: int = 0

    @field_serializer("funds", "available_funds", "lockup_rate", when_used="json")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class ServiceApproval(CamelModel):
    """Spending limits a wallet has granted the storage service."""

    rate_allowance: int = 0
    lockup_allowance: int = 0
    max_lockup_period: int = 0


class TransactionReceipt(CamelModel):
    """Confirmed transaction."""

    tx_hash: str
    status: int = 1
    block_number: int | None = None


class UploadResult(CamelModel):
    """Result of uploading bytes to the storage backend."""

    piece_cid: str
    size: int


class PipelineState(str, Enum):
    """Per-upload states of the storage pipeline."""

    IDLE = "idle"
    PREPARING = "preparing"
    DEPOSITING = "depositing"
    APPROVING = "approving"
    UPLOADING = "uploading"
    CONFIRMING = "confirming"
    COMPLETED = "completed"
    ERROR = "error"


class PipelineStatus(CamelModel):
    """Snapshot of pipeline progress, reported at every transition."""

    state: PipelineState = PipelineState.IDLE
    progress: int = Field(default=0, ge=0, le=100)
    message: str = ""
    tx_hash: str | None = None
    error: str | None = None
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StoragePaymentPlan(CamelModel):
    """Sample-and-extrapolate payment plan for the paid storage quota."""

    sample_size: int
    target_size: int
    multiplier: int
    sample_costs: StorageCosts
    scaled_costs: StorageCosts
    deposit_amount: int
    persistence_days: int

    @field_serializer("deposit_amount", when_used="json")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class StoragePaymentResult(CamelModel):
    """Outcome of a completed storage payment."""

    deposit_amount: int
    storage_gb: int = 10
    duration_days: int = 30
    tx_hash: str
    statuses: list[PipelineStatus] = Field(default_factory=list)

    @field_serializer("deposit_amount", when_used="json")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class UploadedFileResult(CamelModel):
    """A file pinned to Filecoin through the storage pipeline."""

    file_name: str
    file_size: int
    piece_cid: str
    tx_hash: str | None = None
    download_url: str
    statuses: list[PipelineStatus] = Field(default_factory=list)


class StoredPromptResult(CamelModel):
    """Result of pinning a prompt document to Filecoin."""

    success: bool = True
    cid: str
    download_url: str
    statuses: list[PipelineStatus] = Field(default_factory=list)


class StorageUsage(CamelModel):
    """Paid storage quota and how long the current balance lasts."""

    current_usage_gb: float = 0.0
    total_paid_gb: int = 10
    days_remaining: int = 0
    needs_repayment: bool = True
    funds: str = "0"
    formatted_funds: str = "0.0000"
    message: str = ""


class NetworkInfo(BaseModel):
    """Static network metadata handed to clients."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    chain_id: int = Field(alias="chainId")
    explorer: str
    faucet: str | None = None
