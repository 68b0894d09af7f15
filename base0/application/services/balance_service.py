"""
Storage usage and balance reporting.

Dependencies: base0.boundary.storage, base0.core.balance
System role: Decides whether a wallet must pay before storing prompts
"""

import logging

from base0.boundary.storage.factory import StorageBackendFactory
from base0.configs.filecoin import GIB, FilecoinSettings
from base0.core.balance import (
    calculate_days_from_balance,
    format_balance,
    get_network_config,
    is_storage_balance_sufficient,
)
from base0.core.cost_estimator import plan_storage_payment
from base0.core.exceptions import WalletNotConnectedError
from base0.models.storage import NetworkInfo, StorageUsage

logger = logging.getLogger(__name__)


class BalanceService:
    """Reads payment-contract balances and turns them into a usage report."""

    def __init__(self, backends: StorageBackendFactory, settings: FilecoinSettings) -> None:
        self.backends = backends
        self.settings = settings

    async def get_storage_usage(self, address: str | None, current_usage_bytes: int = 0) -> StorageUsage:
        """
        Report how long the wallet's deposited funds cover the paid quota.

        Args:
            address: Wallet address
            current_usage_bytes: Bytes the wallet has stored so far

        Returns:
            StorageUsage: days_remaining is funds // scaled per-day cost;
            needs_repayment once fewer than the threshold days remain
        """
        if not address:
            raise WalletNotConnectedError()

        backend = self.backends.for_wallet(address)
        account = await backend.get_account_info(address)
        plan = await plan_storage_payment(backend, self.settings)

        days_remaining = calculate_days_from_balance(account.funds, plan.scaled_costs.per_day)
        total_paid_gb = self.settings.target_size_bytes // GIB
        current_usage_gb = current_usage_bytes / GIB
        sufficient, message = is_storage_balance_sufficient(
            current_usage_gb,
            total_paid_gb,
            days_remaining,
            threshold_days=self.settings.repayment_threshold_days,
        )

        logger.info(
            f"{__name__}:get_storage_usage - {address}: funds={account.funds} "
            f"days_remaining={days_remaining} needs_repayment={not sufficient}"
        )
        return StorageUsage(
            current_usage_gb=current_usage_gb,
            total_paid_gb=total_paid_gb,
            days_remaining=days_remaining,
            needs_repayment=not sufficient,
            funds=str(account.funds),
            formatted_funds=format_balance(account.funds),
            message=message,
        )

    def get_network_config(self) -> NetworkInfo:
        return get_network_config(self.settings.network)
