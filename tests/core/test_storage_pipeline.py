"""
Test suite for the storage state machine.

Covers the sufficient-allowance shortcut, the deposit/approve path, and the
rule that a payment failure stops the run before anything is uploaded.

System role: Verification of the storage/payment pipeline
"""

from unittest.mock import AsyncMock

import pytest

from base0.boundary.storage.local_backend import LocalLedger, LocalStorageBackend
from base0.core.exceptions import PaymentError, StorageError
from base0.core.storage_pipeline import StoragePipeline
from base0.models.storage import (
    AccountInfo,
    PipelineState,
    PreflightInfo,
    ServiceApproval,
    StorageCosts,
    TransactionReceipt,
    UploadResult,
)

SERVICE = "0x00000000000000000000000000000000000000aa"
COSTS = StorageCosts(per_epoch=2, per_day=5760, per_month=172800)


def states(pipeline: StoragePipeline) -> list[PipelineState]:
    """Distinct states in the order they were entered."""
    seen: list[PipelineState] = []
    for status in pipeline.history:
        if not seen or seen[-1] != status.state:
            seen.append(status.state)
    return seen


def mock_backend(sufficient: bool) -> AsyncMock:
    backend = AsyncMock()
    backend.service_address = SERVICE
    backend.preflight_upload.return_value = PreflightInfo(
        estimated_cost=COSTS,
        allowance_sufficient=sufficient,
    )
    backend.get_account_info.return_value = AccountInfo()
    backend.get_service_approval.return_value = None
    backend.deposit.return_value = TransactionReceipt(tx_hash="0xdeposit")
    backend.approve_service.return_value = TransactionReceipt(tx_hash="0xapprove")
    backend.upload.return_value = UploadResult(piece_cid="bafkreitest", size=4)
    return backend


class TestStoragePipeline:
    """Test suite for StoragePipeline.run()."""

    @pytest.mark.asyncio
    async def test_sufficient_allowance_skips_payment(self) -> None:
        backend = mock_backend(sufficient=True)
        pipeline = StoragePipeline(backend)

        result = await pipeline.run(b"data")

        assert result.piece_cid == "bafkreitest"
        backend.deposit.assert_not_awaited()
        backend.approve_service.assert_not_awaited()
        assert states(pipeline) == [
            PipelineState.IDLE,
            PipelineState.PREPARING,
            PipelineState.UPLOADING,
            PipelineState.CONFIRMING,
            PipelineState.COMPLETED,
        ]
        assert pipeline.status.progress == 100

    @pytest.mark.asyncio
    async def test_insufficient_allowance_deposits_then_approves(self) -> None:
        """Test the deposit covers the persistence period and the approval matches it."""
        # Arrange
        backend = mock_backend(sufficient=False)
        pipeline = StoragePipeline(backend, persistence_days=30)

        # Act
        await pipeline.run(b"data")

        # Assert
        deposit_amount = COSTS.per_day * 30
        backend.deposit.assert_awaited_once_with(deposit_amount, "USDFC")
        backend.approve_service.assert_awaited_once_with(SERVICE, COSTS.per_epoch, deposit_amount, deposit_amount)
        assert states(pipeline) == [
            PipelineState.IDLE,
            PipelineState.PREPARING,
            PipelineState.DEPOSITING,
            PipelineState.APPROVING,
            PipelineState.UPLOADING,
            PipelineState.CONFIRMING,
            PipelineState.COMPLETED,
        ]
        assert [s.tx_hash for s in pipeline.history if s.tx_hash] == ["0xdeposit", "0xapprove"]

    @pytest.mark.asyncio
    async def test_approval_adds_to_committed_rate_and_funds(self) -> None:
        """Test a top-up approves the committed rate plus the new one over all funds."""
        # Arrange
        backend = mock_backend(sufficient=False)
        backend.get_account_info.return_value = AccountInfo(funds=1_000_000, lockup_rate=7)
        pipeline = StoragePipeline(backend, persistence_days=30)

        # Act
        await pipeline.run(b"data")

        # Assert
        deposit_amount = COSTS.per_day * 30
        backend.approve_service.assert_awaited_once_with(
            SERVICE, 7 + COSTS.per_epoch, 1_000_000 + deposit_amount, deposit_amount
        )

    @pytest.mark.asyncio
    async def test_approval_never_lowers_existing_allowance(self) -> None:
        backend = mock_backend(sufficient=False)
        backend.get_service_approval.return_value = ServiceApproval(
            rate_allowance=10**9, lockup_allowance=10**15, max_lockup_period=10**15
        )
        pipeline = StoragePipeline(backend)

        await pipeline.run(b"data")

        backend.approve_service.assert_awaited_once_with(SERVICE, 10**9, 10**15, 10**15)

    @pytest.mark.asyncio
    async def test_deposit_revert_stops_before_upload(self) -> None:
        """Test a reverted deposit leaves the pipeline in error without uploading."""
        # Arrange
        backend = mock_backend(sufficient=False)
        backend.deposit.side_effect = PaymentError("contract reverted: insufficient USDFC balance", stage="deposit")
        pipeline = StoragePipeline(backend)

        # Act
        with pytest.raises(PaymentError):
            await pipeline.run(b"data")

        # Assert
        backend.approve_service.assert_not_awaited()
        backend.upload.assert_not_awaited()
        assert pipeline.state is PipelineState.ERROR
        assert "reverted" in pipeline.status.error

    @pytest.mark.asyncio
    async def test_deposit_revert_on_local_backend_stores_nothing(self, wallet: str) -> None:
        ledger = LocalLedger()
        ledger.set_token_balance(wallet, 0)
        pipeline = StoragePipeline(LocalStorageBackend(ledger, wallet, SERVICE))

        with pytest.raises(PaymentError):
            await pipeline.run(b'{"prompt": "x"}')

        assert pipeline.state is PipelineState.ERROR
        assert ledger.blobs == {}
        assert ledger.account(wallet).funds == 0

    @pytest.mark.asyncio
    async def test_non_payment_failure_during_approval_is_wrapped_as_payment(self) -> None:
        backend = mock_backend(sufficient=False)
        backend.approve_service.side_effect = StorageError("gateway down")
        pipeline = StoragePipeline(backend)

        with pytest.raises(PaymentError) as exc_info:
            await pipeline.run(b"data")

        assert exc_info.value.message == "Failed to prepare payment: gateway down"
        backend.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_storage_error(self) -> None:
        backend = mock_backend(sufficient=True)
        backend.upload.side_effect = RuntimeError("disk full")
        pipeline = StoragePipeline(backend)

        with pytest.raises(StorageError):
            await pipeline.run(b"data")

        assert pipeline.state is PipelineState.ERROR

    @pytest.mark.asyncio
    async def test_status_callback_receives_every_transition(self) -> None:
        received = []
        pipeline = StoragePipeline(mock_backend(sufficient=True), on_status=received.append)

        await pipeline.run(b"data")

        assert received == pipeline.history[1:]
