"""
Storage cost estimation.

The preflight API caps the size it will quote, so the paid quota is priced
by quoting a sample and scaling linearly: a 100 MiB sample stands in for the
10 GiB quota, and the deposit covers 30 days of the scaled daily cost.

Dependencies: base0.boundary.storage
System role: Payment planning for the storage pipeline
"""

import logging
import math

from base0.boundary.storage.backend import StorageBackend
from base0.configs.filecoin import FilecoinSettings
from base0.models.storage import AccountInfo, ServiceApproval, StorageCosts, StoragePaymentPlan

logger = logging.getLogger(__name__)


def scale_multiplier(sample_size: int, target_size: int) -> int:
    """Number of samples needed to cover the target, rounded up."""
    if sample_size <= 0:
        raise ValueError("sample_size must be positive")
    return math.ceil(target_size / sample_size)


def scale_costs(sample_costs: StorageCosts, sample_size: int, target_size: int) -> StorageCosts:
    """
    Extrapolate sample costs to the target size.

    Args:
        sample_costs: Costs quoted for sample_size bytes
        sample_size: Bytes the quote was for
        target_size: Bytes to price

    Returns:
        StorageCosts: Every component multiplied by ceil(target / sample)
    """
    return sample_costs.scaled(scale_multiplier(sample_size, target_size))


def deposit_for(costs: StorageCosts, days: int) -> int:
    """Token amount covering `days` of per-day cost."""
    return costs.per_day * days


def top_up_approval(
    account: AccountInfo,
    current: ServiceApproval | None,
    added_rate: int,
    deposit: int,
) -> ServiceApproval:
    """
    Service approval after depositing `deposit` for `added_rate` more per epoch.

    The rate allowance covers the rate already committed by earlier uploads
    plus the new one, and the lockup allowance covers the funds already held
    plus the deposit. An existing approval is never lowered. The deposit
    doubles as the max lockup period, as the Synapse payment flow does.
    """
    current = current or ServiceApproval()
    return ServiceApproval(
        rate_allowance=max(account.lockup_rate + added_rate, current.rate_allowance),
        lockup_allowance=max(account.funds + deposit, current.lockup_allowance),
        max_lockup_period=max(deposit, current.max_lockup_period),
    )


async def plan_storage_payment(
    backend: StorageBackend,
    settings: FilecoinSettings,
) -> StoragePaymentPlan:
    """
    Price the paid storage quota for a wallet.

    Args:
        backend: Wallet-bound storage backend used for the preflight quote
        settings: Sample size, target size and persistence period

    Returns:
        StoragePaymentPlan: Sample and scaled costs plus the deposit amount
    """
    sample_size = settings.sample_size_bytes
    target_size = settings.target_size_bytes
    multiplier = scale_multiplier(sample_size, target_size)

    preflight = await backend.preflight_upload(sample_size)
    scaled = preflight.estimated_cost.scaled(multiplier)
    deposit = deposit_for(scaled, settings.persistence_period_days)

    logger.info(
        f"{__name__}:plan_storage_payment - {sample_size} byte sample -> {target_size} bytes "
        f"({multiplier}x): per_day={scaled.per_day} deposit={deposit}"
    )
    return StoragePaymentPlan(
        sample_size=sample_size,
        target_size=target_size,
        multiplier=multiplier,
        sample_costs=preflight.estimated_cost,
        scaled_costs=scaled,
        deposit_amount=deposit,
        persistence_days=settings.persistence_period_days,
    )
