"""
Test suite for storage cost estimation.

System role: Verification of sample-and-extrapolate pricing
"""

import pytest

from base0.boundary.storage.local_backend import LocalStorageBackend
from base0.configs.filecoin import GIB, MIB
from base0.core.cost_estimator import deposit_for, plan_storage_payment, scale_costs, scale_multiplier
from base0.models.storage import StorageCosts


class TestScaling:
    def test_multiplier_rounds_up(self) -> None:
        # 10 GiB / 100 MiB = 102.4
        assert scale_multiplier(100 * MIB, 10 * GIB) == 103
        assert scale_multiplier(100, 100) == 1
        assert scale_multiplier(100, 101) == 2

    def test_multiplier_rejects_empty_sample(self) -> None:
        with pytest.raises(ValueError):
            scale_multiplier(0, 10)

    def test_scale_costs_multiplies_every_component(self) -> None:
        sample = StorageCosts(per_epoch=3, per_day=8640, per_month=259200)

        scaled = scale_costs(sample, 100 * MIB, 10 * GIB)

        assert scaled == StorageCosts(per_epoch=309, per_day=889920, per_month=26697600)

    def test_deposit_covers_thirty_days(self) -> None:
        costs = StorageCosts(per_epoch=1, per_day=2880, per_month=86400)

        assert deposit_for(costs, 30) == 86400


class TestPlanStoragePayment:
    @pytest.mark.asyncio
    async def test_plan_prices_the_quota_from_a_sample(self, ledger, wallet, filecoin_settings) -> None:
        """Test the plan quotes the sample and extrapolates to the target."""
        # Arrange
        backend = LocalStorageBackend(ledger, wallet, filecoin_settings.warm_storage_address)
        sample_costs = ledger.costs_for(filecoin_settings.sample_size_bytes)

        # Act
        plan = await plan_storage_payment(backend, filecoin_settings)

        # Assert
        assert plan.multiplier == 103
        assert plan.sample_costs == sample_costs
        assert plan.scaled_costs.per_day == sample_costs.per_day * 103
        assert plan.deposit_amount == plan.scaled_costs.per_day * 30
        assert plan.persistence_days == 30
