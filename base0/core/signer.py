"""
Wallet signer acquisition.

A wallet address can be known before its signer is usable (for example right
after a network switch). Storage operations wait a bounded time for the
signer and give up with a SignerTimingError, which callers treat as a
fallback-eligible failure.

Dependencies: tenacity, eth_account
System role: Signer readiness gate for the storage pipeline
"""

import logging
from typing import Protocol

from eth_account import Account
from eth_account.signers.local import LocalAccount
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_fixed
from tenacity.wait import wait_base

from base0.configs.filecoin import FilecoinSettings
from base0.core.exceptions import SignerTimingError, WalletNotConnectedError

logger = logging.getLogger(__name__)

SIGNER_TIMING_MESSAGE = (
    "Signer timing issue detected. Wait a few seconds and try again, "
    "or reconnect your wallet."
)


class SignerProvider(Protocol):
    """Looks up the signer for a wallet address, or None while unavailable."""

    def get_signer(self, address: str) -> LocalAccount | None: ...


class StaticSignerProvider:
    """Hands out one account for every wallet (custodial signing)."""

    def __init__(self, account: LocalAccount | None) -> None:
        self.account = account

    def get_signer(self, address: str) -> LocalAccount | None:
        return self.account


def build_signer_provider(settings: FilecoinSettings) -> SignerProvider:
    """
    Custodial signer from the configured key.

    Without a key, the local storage backend gets a throwaway account so the
    storage flow works in development; the gateway backend gets none and
    every store falls back to local-only persistence.
    """
    if settings.wallet_private_key:
        return StaticSignerProvider(Account.from_key(settings.wallet_private_key))
    if settings.storage_backend == "local":
        logger.warning(f"{__name__}:build_signer_provider - No wallet key configured, using ephemeral signer")
        return StaticSignerProvider(Account.create())
    logger.warning(f"{__name__}:build_signer_provider - No wallet key configured, storage signing disabled")
    return StaticSignerProvider(None)


async def wait_for_signer(
    provider: SignerProvider,
    address: str | None,
    retries: int = 3,
    delay_seconds: float = 1.5,
    wait: wait_base | None = None,
) -> LocalAccount:
    """
    Return the wallet's signer, waiting for it if necessary.

    Args:
        provider: Signer lookup
        address: Connected wallet address
        retries: Extra checks after the first one
        delay_seconds: Wait between checks
        wait: Optional tenacity wait strategy (tests pass wait_none())

    Returns:
        LocalAccount: The signer

    Raises:
        WalletNotConnectedError: If no address is given
        SignerTimingError: If the signer is still missing after all retries
    """
    if not address:
        raise WalletNotConnectedError("Wallet address not found. Please connect your wallet.")

    attempts = 0

    async def check() -> LocalAccount | None:
        nonlocal attempts
        attempts += 1
        signer = provider.get_signer(address)
        if signer is None and attempts <= retries:
            logger.info(f"{__name__}:wait_for_signer - Retry {attempts}/{retries}: waiting for signer")
        return signer

    def give_up(retry_state) -> None:
        logger.error(f"{__name__}:wait_for_signer - Signer still not available after {retries} retries")
        raise SignerTimingError(SIGNER_TIMING_MESSAGE, details={"attempts": attempts})

    retrying = AsyncRetrying(
        retry=retry_if_result(lambda signer: signer is None),
        stop=stop_after_attempt(retries + 1),
        wait=wait or wait_fixed(delay_seconds),
        retry_error_callback=give_up,
    )
    return await retrying(check)
