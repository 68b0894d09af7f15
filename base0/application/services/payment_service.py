"""
Storage payment service.

Pays for the standard storage quota (10 GiB for 30 days by default). The
quota is priced by sample-and-extrapolate, the 30-day amount is deposited,
and the storage service is approved to spend from it.

Dependencies: base0.boundary.storage, base0.core.signer, tenacity
System role: Use case behind POST /api/storage/{address}/pay
"""

import logging

from tenacity.wait import wait_base

from base0.boundary.storage.backend import DEFAULT_TOKEN
from base0.boundary.storage.factory import StorageBackendFactory
from base0.configs.filecoin import GIB, FilecoinSettings
from base0.core.balance import format_balance
from base0.core.cost_estimator import plan_storage_payment, top_up_approval
from base0.core.exceptions import Base0Exception, PaymentError
from base0.core.signer import SignerProvider, wait_for_signer
from base0.models.storage import (
    PipelineState,
    PipelineStatus,
    StoragePaymentPlan,
    StoragePaymentResult,
)

logger = logging.getLogger(__name__)


class PaymentService:
    """Deposits and approvals for the paid storage quota."""

    def __init__(
        self,
        backends: StorageBackendFactory,
        signers: SignerProvider,
        settings: FilecoinSettings,
        signer_wait: wait_base | None = None,
    ) -> None:
        """
        Initialize payment service.

        Args:
            backends: Wallet-bound storage backend factory
            signers: Signer lookup for the paying wallet
            settings: Quota, persistence and signer retry settings
            signer_wait: Optional tenacity wait between signer checks
        """
        self.backends = backends
        self.signers = signers
        self.settings = settings
        self.signer_wait = signer_wait

    async def get_storage_costs(self, address: str) -> StoragePaymentPlan:
        return await plan_storage_payment(self.backends.for_wallet(address), self.settings)

    async def pay_for_storage(self, address: str | None) -> StoragePaymentResult:
        """
        Deposit and approve enough to cover the paid quota.

        Args:
            address: Paying wallet

        Returns:
            StoragePaymentResult: Deposit amount, approval tx hash and the status log

        Raises:
            WalletNotConnectedError: No wallet address
            SignerTimingError: Signer never became available
            PaymentError: Deposit or approval reverted
        """
        await wait_for_signer(
            self.signers,
            address,
            retries=self.settings.signer_retry_attempts,
            delay_seconds=self.settings.signer_retry_delay_seconds,
            wait=self.signer_wait,
        )

        statuses: list[PipelineStatus] = []

        def report(state: PipelineState, progress: int, message: str, tx_hash: str | None = None) -> None:
            statuses.append(PipelineStatus(state=state, progress=progress, message=message, tx_hash=tx_hash))
            logger.info(f"{__name__}:pay_for_storage - {state.value} ({progress}%) {message}")

        backend = self.backends.for_wallet(address)
        try:
            report(PipelineState.PREPARING, 20, "Calculating storage costs...")
            plan = await plan_storage_payment(backend, self.settings)
            deposit_amount = plan.deposit_amount
            account = await backend.get_account_info()
            current = await backend.get_service_approval(backend.service_address)
            allowance = top_up_approval(account, current, plan.scaled_costs.per_epoch, deposit_amount)

            report(
                PipelineState.DEPOSITING,
                30,
                f"Depositing {format_balance(deposit_amount)} {DEFAULT_TOKEN}...",
            )
            deposit = await backend.deposit(deposit_amount, DEFAULT_TOKEN)
            report(PipelineState.DEPOSITING, 70, f"{DEFAULT_TOKEN} deposited successfully", deposit.tx_hash)

            report(PipelineState.APPROVING, 80, "Approving storage service...")
            approval = await backend.approve_service(
                backend.service_address,
                allowance.rate_allowance,
                allowance.lockup_allowance,
                allowance.max_lockup_period,
            )
        except Base0Exception as e:
            statuses.append(
                PipelineStatus(
                    state=PipelineState.ERROR,
                    progress=statuses[-1].progress if statuses else 0,
                    message="Storage payment failed",
                    error=e.message,
                )
            )
            logger.error(f"{__name__}:pay_for_storage - {address}: {e}")
            if isinstance(e, PaymentError):
                raise
            raise PaymentError(f"Storage payment failed: {e.message}", stage="payment") from e

        report(PipelineState.COMPLETED, 100, "Storage payment completed", approval.tx_hash)
        return StoragePaymentResult(
            deposit_amount=deposit_amount,
            storage_gb=self.settings.target_size_bytes // GIB,
            duration_days=self.settings.persistence_period_days,
            tx_hash=approval.tx_hash,
            statuses=statuses,
        )
