"""
Storage backend selection.

Dependencies: base0.configs
System role: Builds wallet-bound storage backends from settings
"""

import logging

import httpx

from base0.boundary.storage.backend import StorageBackend
from base0.boundary.storage.gateway_client import SynapseGatewayClient
from base0.boundary.storage.local_backend import LocalLedger, LocalStorageBackend
from base0.configs.filecoin import FilecoinSettings

logger = logging.getLogger(__name__)


class StorageBackendFactory:
    """
    Hands out a StorageBackend bound to a given wallet.

    The local backend shares one ledger across wallets so balances and blobs
    persist for the life of the process.
    """

    def __init__(
        self,
        settings: FilecoinSettings,
        ledger: LocalLedger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.ledger = ledger or LocalLedger(epochs_per_day=settings.epochs_per_day)
        self._transport = transport

    def for_wallet(self, wallet_address: str) -> StorageBackend:
        if self.settings.storage_backend == "gateway":
            return SynapseGatewayClient(
                base_url=self.settings.synapse_gateway_url,
                wallet_address=wallet_address,
                service_address=self.settings.warm_storage_address,
                with_cdn=self.settings.with_cdn,
                timeout=self.settings.synapse_timeout_seconds,
                transport=self._transport,
            )
        return LocalStorageBackend(
            ledger=self.ledger,
            wallet_address=wallet_address,
            service_address=self.settings.warm_storage_address,
        )
