"""
Balance and storage usage helpers.

Dependencies: base0.configs
System role: Formatting and quota arithmetic for storage usage reporting
"""

import math

from base0.configs.filecoin import NETWORKS
from base0.models.storage import NetworkInfo

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_storage_size(num_bytes: int) -> str:
    """Human-readable size with up to two decimals, e.g. '1.5 MB'."""
    if num_bytes == 0:
        return "0 Bytes"
    index = min(int(math.floor(math.log(num_bytes) / math.log(1024))), len(SIZE_UNITS) - 1)
    value = math.floor(num_bytes / 1024**index * 100 + 0.5) / 100
    return f"{value:g} {SIZE_UNITS[index]}"


def format_balance(balance: int, decimals: int = 18) -> str:
    """Fixed-point rendering of a token amount, truncated to four decimals."""
    digits = str(balance)
    decimal_pos = len(digits) - decimals
    if decimal_pos <= 0:
        return "0." + "0" * -decimal_pos + digits
    return digits[:decimal_pos] + "." + digits[decimal_pos:][:4]


def calculate_days_from_balance(balance: int, daily_rate: int) -> int:
    if daily_rate == 0:
        return 0
    return balance // daily_rate


def is_storage_balance_sufficient(
    current_usage_gb: float,
    paid_storage_gb: float,
    days_remaining: int,
    threshold_days: int = 10,
) -> tuple[bool, str]:
    """
    Decide whether the paid quota still covers new uploads.

    Returns:
        tuple[bool, str]: (sufficient, user-facing message)
    """
    if current_usage_gb > paid_storage_gb:
        return False, (
            f"Usage ({current_usage_gb:.2f}GB) exceeds paid storage ({paid_storage_gb:g}GB)"
        )
    if days_remaining < threshold_days:
        return False, (
            f"Storage expires in {days_remaining} days. Please renew to continue uploading."
        )
    return True, f"Storage valid for {days_remaining} more days"


def get_network_config(network: str) -> NetworkInfo:
    config = NETWORKS[network]
    return NetworkInfo(
        name=config["name"],
        chain_id=config["chain_id"],
        explorer=config["explorer"],
        faucet=config["faucet"],
    )
