"""
Test suite for balance formatting and storage quota checks.

System role: Verification of storage usage reporting helpers
"""

from base0.core.balance import (
    calculate_days_from_balance,
    format_balance,
    format_storage_size,
    get_network_config,
    is_storage_balance_sufficient,
)


class TestFormatBalance:
    def test_truncates_to_four_decimals(self) -> None:
        assert format_balance(1_234_567_890_000_000_000) == "1.2345"

    def test_whole_tokens(self) -> None:
        assert format_balance(25 * 10**18) == "25.0000"

    def test_sub_token_amount_is_left_padded(self) -> None:
        assert format_balance(5 * 10**17) == "0.500000000000000000"
        assert format_balance(12, decimals=4) == "0.0012"

    def test_custom_decimals(self) -> None:
        assert format_balance(1_500_000, decimals=6) == "1.5000"


class TestFormatStorageSize:
    def test_zero(self) -> None:
        assert format_storage_size(0) == "0 Bytes"

    def test_units(self) -> None:
        assert format_storage_size(512) == "512 Bytes"
        assert format_storage_size(1536) == "1.5 KB"
        assert format_storage_size(10 * 1024**3) == "10 GB"

    def test_rounds_to_two_decimals(self) -> None:
        assert format_storage_size(1024**2 + 1024**2 // 3) == "1.33 MB"


class TestStorageDays:
    def test_zero_rate_means_zero_days(self) -> None:
        assert calculate_days_from_balance(10**18, 0) == 0

    def test_whole_days_only(self) -> None:
        assert calculate_days_from_balance(95, 10) == 9


class TestIsStorageBalanceSufficient:
    """Quota check: usage first, then remaining paid days."""

    def test_valid_storage(self) -> None:
        sufficient, message = is_storage_balance_sufficient(1.0, 10, 30)

        assert sufficient is True
        assert message == "Storage valid for 30 more days"

    def test_expiring_storage(self) -> None:
        sufficient, message = is_storage_balance_sufficient(1.0, 10, 9)

        assert sufficient is False
        assert message == "Storage expires in 9 days. Please renew to continue uploading."

    def test_threshold_day_itself_is_sufficient(self) -> None:
        sufficient, _ = is_storage_balance_sufficient(0.0, 10, 10)

        assert sufficient is True

    def test_usage_over_quota_wins(self) -> None:
        sufficient, message = is_storage_balance_sufficient(12.5, 10, 100)

        assert sufficient is False
        assert message == "Usage (12.50GB) exceeds paid storage (10GB)"


def test_network_config_calibration() -> None:
    info = get_network_config("calibration")

    assert info.chain_id == 314159
    assert info.faucet
