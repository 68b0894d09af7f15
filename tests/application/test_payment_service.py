"""
Test suite for PaymentService and BalanceService over the local backend.

System role: Verification of storage payment and repayment decisions
"""

import pytest

from base0.core.exceptions import PaymentError, SignerTimingError
from base0.core.signer import StaticSignerProvider
from base0.models.storage import PipelineState


class TestPayForStorage:
    @pytest.mark.asyncio
    async def test_payment_deposits_plan_and_approves_service(
        self, payment_service, ledger, wallet, filecoin_settings
    ) -> None:
        """Test a payment deposits 30 days of scaled cost and approves the storage service."""
        # Arrange
        plan = await payment_service.get_storage_costs(wallet)
        starting_tokens = ledger.token_balance(wallet)

        # Act
        result = await payment_service.pay_for_storage(wallet)

        # Assert
        assert result.deposit_amount == plan.deposit_amount
        assert result.storage_gb == 10
        assert result.duration_days == 30
        assert ledger.account(wallet).funds == plan.deposit_amount
        assert ledger.token_balance(wallet) == starting_tokens - plan.deposit_amount
        approval = ledger.approvals[(wallet.lower(), filecoin_settings.warm_storage_address.lower())]
        assert approval.rate_allowance == plan.scaled_costs.per_epoch
        assert approval.lockup_allowance == plan.deposit_amount
        assert [s.state for s in result.statuses] == [
            PipelineState.PREPARING,
            PipelineState.DEPOSITING,
            PipelineState.DEPOSITING,
            PipelineState.APPROVING,
            PipelineState.COMPLETED,
        ]
        assert result.statuses[-1].tx_hash == result.tx_hash

    @pytest.mark.asyncio
    async def test_second_payment_extends_lockup_over_all_funds(
        self, payment_service, ledger, wallet, filecoin_settings
    ) -> None:
        plan = await payment_service.get_storage_costs(wallet)

        await payment_service.pay_for_storage(wallet)
        await payment_service.pay_for_storage(wallet)

        approval = ledger.approvals[(wallet.lower(), filecoin_settings.warm_storage_address.lower())]
        assert approval.rate_allowance == plan.scaled_costs.per_epoch
        assert approval.lockup_allowance == 2 * plan.deposit_amount
        assert ledger.account(wallet).funds == 2 * plan.deposit_amount

    @pytest.mark.asyncio
    async def test_revert_surfaces_as_payment_error(self, payment_service, ledger, wallet) -> None:
        ledger.set_token_balance(wallet, 0)

        with pytest.raises(PaymentError) as exc_info:
            await payment_service.pay_for_storage(wallet)

        assert exc_info.value.stage == "deposit"
        assert ledger.approvals == {}

    @pytest.mark.asyncio
    async def test_missing_signer(self, backends, filecoin_settings, no_wait, wallet) -> None:
        from base0.application.services.payment_service import PaymentService

        service = PaymentService(backends, StaticSignerProvider(None), filecoin_settings, signer_wait=no_wait)

        with pytest.raises(SignerTimingError):
            await service.pay_for_storage(wallet)


class TestStorageUsage:
    @pytest.mark.asyncio
    async def test_unfunded_wallet_needs_repayment(self, balance_service, wallet) -> None:
        usage = await balance_service.get_storage_usage(wallet)

        assert usage.needs_repayment is True
        assert usage.days_remaining == 0
        assert usage.funds == "0"
        assert usage.message == "Storage expires in 0 days. Please renew to continue uploading."

    @pytest.mark.asyncio
    async def test_paid_wallet_covers_persistence_period(self, balance_service, payment_service, wallet) -> None:
        """Test a fresh payment buys exactly the persistence period in days."""
        # Arrange
        await payment_service.pay_for_storage(wallet)

        # Act
        usage = await balance_service.get_storage_usage(wallet, current_usage_bytes=1024**3)

        # Assert
        assert usage.needs_repayment is False
        assert usage.days_remaining == 30
        assert usage.current_usage_gb == 1.0
        assert usage.total_paid_gb == 10
        assert usage.message == "Storage valid for 30 more days"

    @pytest.mark.asyncio
    async def test_usage_over_quota_needs_repayment(self, balance_service, payment_service, wallet) -> None:
        await payment_service.pay_for_storage(wallet)

        usage = await balance_service.get_storage_usage(wallet, current_usage_bytes=11 * 1024**3)

        assert usage.needs_repayment is True

    def test_network_config(self, balance_service) -> None:
        assert balance_service.get_network_config().name == "Filecoin Calibration"
