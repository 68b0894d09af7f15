"""
Filecoin storage backends.

Exports:
  - StorageBackend: Wallet-bound storage/payment contract
  - SynapseGatewayClient: HTTP client for a Synapse SDK gateway
  - LocalStorageBackend, LocalLedger: In-process backend
  - StorageBackendFactory: Settings-driven backend selection
"""

from base0.boundary.storage.backend import DEFAULT_TOKEN, StorageBackend
from base0.boundary.storage.factory import StorageBackendFactory
from base0.boundary.storage.gateway_client import SynapseGatewayClient
from base0.boundary.storage.local_backend import LocalLedger, LocalStorageBackend, raw_cid

__all__ = [
    "DEFAULT_TOKEN",
    "StorageBackend",
    "StorageBackendFactory",
    "SynapseGatewayClient",
    "LocalLedger",
    "LocalStorageBackend",
    "raw_cid",
]
