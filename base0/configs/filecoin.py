"""
Filecoin storage, payment and contract configuration.

Network selection, deployed contract addresses, signer keys and the
constants that drive the storage payment plan.

Dependencies: pydantic, pydantic_settings
System role: Storage/payment pipeline and content registry configuration
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from base0.configs.base import BaseSettings

NETWORKS: dict[str, dict] = {
    "calibration": {
        "name": "Filecoin Calibration",
        "chain_id": 314159,
        "rpc_url": "https://api.calibration.node.glif.io/rpc/v1",
        "explorer": "https://calibration.filfox.info/en/tx/",
        "faucet": "https://faucet.calibnet.chainsafe-fil.io",
    },
    "mainnet": {
        "name": "Filecoin Mainnet",
        "chain_id": 314,
        "rpc_url": "https://api.node.glif.io/rpc/v1",
        "explorer": "https://filfox.info/en/tx/",
        "faucet": None,
    },
}

MIB = 1024 * 1024
GIB = 1024 * MIB


class FilecoinSettings(BaseSettings):
    """Filecoin network, Synapse storage and content registry configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILECOIN_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    network: Literal["calibration", "mainnet"] = Field(
        default="calibration",
        description="Filecoin network the app talks to",
    )
    rpc_url: str | None = Field(
        default=None,
        description="JSON-RPC endpoint; derived from network when unset",
    )

    calibration_cid_store_address: str = Field(
        default="",
        validation_alias=AliasChoices(
            "NEXT_PUBLIC_CALIBRATION_CID_STORE_ADDRESS",
            "FILECOIN_CALIBRATION_CID_STORE_ADDRESS",
        ),
        description="FilecoinCIDStore address on calibration",
    )
    mainnet_cid_store_address: str = Field(
        default="",
        validation_alias=AliasChoices(
            "NEXT_PUBLIC_FILECOIN_CID_STORE_ADDRESS",
            "FILECOIN_MAINNET_CID_STORE_ADDRESS",
        ),
        description="FilecoinCIDStore address on mainnet",
    )
    deployer_private_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DEPLOYER_PRIVATE_KEY", "FILECOIN_DEPLOYER_PRIVATE_KEY"),
        description="Signer key for contract deployment and CLI tasks",
    )
    wallet_private_key: str | None = Field(
        default=None,
        description="Custodial signer key used for storage payments and uploads",
    )

    storage_backend: Literal["gateway", "local"] = Field(
        default="local",
        description="Synapse gateway over HTTP, or the in-process local backend",
    )
    registry_backend: Literal["web3", "memory"] = Field(
        default="memory",
        description="Content registry implementation",
    )
    synapse_gateway_url: str = Field(
        default="http://localhost:8787",
        description="Synapse storage gateway base URL",
    )
    synapse_timeout_seconds: float = Field(default=300.0, description="Gateway request timeout")
    warm_storage_address: str = Field(
        default="0x0000000000000000000000000000000000000000",
        description="Warm storage service approved to spend deposited funds",
    )
    with_cdn: bool = Field(default=False, description="Request CDN-backed storage")
    piece_download_base_url: str = Field(
        default="https://api.synapse.storage/piece",
        description="Base URL for piece downloads",
    )

    persistence_period_days: int = Field(default=30, description="Days of storage each deposit covers")
    sample_size_bytes: int = Field(default=100 * MIB, description="Preflight sample size")
    target_size_bytes: int = Field(default=10 * GIB, description="Storage quota paid for")
    repayment_threshold_days: int = Field(default=10, description="Renew when fewer days remain")
    epochs_per_day: int = Field(default=2880, description="Filecoin epochs per day")

    max_upload_size_bytes: int = Field(default=200 * MIB, description="Largest single file upload")

    signer_retry_attempts: int = Field(default=3, description="Signer readiness retries")
    signer_retry_delay_seconds: float = Field(default=1.5, description="Wait between signer retries")

    @property
    def network_config(self) -> dict:
        """Static metadata for the selected network."""
        return NETWORKS[self.network]

    @property
    def effective_rpc_url(self) -> str:
        """RPC URL, falling back to the network default."""
        return self.rpc_url or self.network_config["rpc_url"]

    @property
    def cid_store_address(self) -> str:
        """FilecoinCIDStore address for the selected network."""
        if self.network == "calibration":
            return self.calibration_cid_store_address
        return self.mainnet_cid_store_address
