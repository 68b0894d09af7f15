"""
Per-upload storage state machine.

idle -> preparing -> (allowance sufficient ? uploading
                      : depositing -> approving -> uploading)
     -> confirming -> completed | error

Every transition is appended to `history` and pushed to the optional
status callback. Payment failures stop the run before anything is uploaded.

Dependencies: base0.boundary.storage
System role: Deposit, approval and upload sequencing for one payload
"""

import logging
from typing import Callable

from base0.boundary.storage.backend import DEFAULT_TOKEN, StorageBackend
from base0.core.cost_estimator import deposit_for, top_up_approval
from base0.core.exceptions import Base0Exception, PaymentError, StorageError
from base0.models.storage import PipelineState, PipelineStatus, UploadResult
from base0.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

StatusCallback = Callable[[PipelineStatus], None]


class StoragePipeline:
    """
    Runs one upload through preflight, payment and upload.

    Args:
        backend: Wallet-bound storage backend
        persistence_days: Days of per-day cost to deposit when funds run short
        on_status: Optional callback receiving every status
    """

    def __init__(
        self,
        backend: StorageBackend,
        persistence_days: int = 30,
        on_status: StatusCallback | None = None,
    ) -> None:
        self.backend = backend
        self.persistence_days = persistence_days
        self.on_status = on_status
        self.status = PipelineStatus()
        self.history: list[PipelineStatus] = [self.status]

    @property
    def state(self) -> PipelineState:
        return self.status.state

    def _transition(
        self,
        state: PipelineState,
        progress: int,
        message: str,
        tx_hash: str | None = None,
        error: str | None = None,
    ) -> None:
        self.status = PipelineStatus(
            state=state,
            progress=progress,
            message=message,
            tx_hash=tx_hash,
            error=error,
        )
        self.history.append(self.status)
        logger.debug(f"{__name__}:_transition - {state.value} ({progress}%) {message}")
        if self.on_status:
            self.on_status(self.status)

    async def prepare(self, size: int) -> None:
        """Make sure the wallet can pay for `size` bytes, depositing if needed."""
        self._transition(PipelineState.PREPARING, 10, "Checking storage costs and balances...")
        preflight = await self.backend.preflight_upload(size)

        if preflight.allowance_sufficient:
            self._transition(PipelineState.PREPARING, 20, "Sufficient balance available")
            return

        costs = preflight.estimated_cost
        deposit_amount = deposit_for(costs, self.persistence_days)
        self._transition(
            PipelineState.DEPOSITING,
            12,
            f"Insufficient balance, depositing {deposit_amount} {DEFAULT_TOKEN} base units...",
        )
        try:
            account = await self.backend.get_account_info()
            current = await self.backend.get_service_approval(self.backend.service_address)
            allowance = top_up_approval(account, current, costs.per_epoch, deposit_amount)

            deposit = await self.backend.deposit(deposit_amount, DEFAULT_TOKEN)
            self._transition(
                PipelineState.DEPOSITING,
                15,
                f"{DEFAULT_TOKEN} deposited successfully",
                tx_hash=deposit.tx_hash,
            )

            self._transition(PipelineState.APPROVING, 17, "Approving storage service spending...")
            approval = await self.backend.approve_service(
                self.backend.service_address,
                allowance.rate_allowance,
                allowance.lockup_allowance,
                allowance.max_lockup_period,
            )
        except PaymentError:
            raise
        except Base0Exception as e:
            raise PaymentError(f"Failed to prepare payment: {e.message}", stage="preflight") from e

        self._transition(
            PipelineState.APPROVING,
            20,
            "Storage service approved",
            tx_hash=approval.tx_hash,
        )

    async def run(self, data: bytes) -> UploadResult:
        """
        Upload `data`, paying first when the allowance does not cover it.

        Returns:
            UploadResult: Piece CID and size

        Raises:
            PaymentError: Deposit, approval or allowance failure; nothing uploaded
            StorageError: Any other storage failure
        """
        try:
            await self.prepare(len(data))

            self._transition(PipelineState.UPLOADING, 30, f"Uploading {len(data)} bytes...")
            result = await self.backend.upload(data)

            self._transition(PipelineState.CONFIRMING, 90, "Confirming upload...")
            if not result.piece_cid:
                raise StorageError("Upload finished without a piece CID")

            self._transition(PipelineState.COMPLETED, 100, f"Stored with CID {result.piece_cid}")
            return result
        except Base0Exception as e:
            self._transition(PipelineState.ERROR, self.status.progress, "Storage failed", error=e.message)
            logger.error(f"{__name__}:run - {e.kind.value} failure: {e}")
            raise
        except Exception as e:
            self._transition(PipelineState.ERROR, self.status.progress, "Storage failed", error=str(e))
            log_exception_with_context(
                logger, f"{__name__}:run - Unexpected failure", e, progress=self.status.progress, size=len(data)
            )
            raise StorageError(f"Storage failed: {e}") from e
