"""
Content registry selection.

Dependencies: base0.configs
System role: Builds the configured content registry
"""

import logging

from base0.boundary.chain.memory_registry import InMemoryContentRegistry
from base0.boundary.chain.registry import ContentRegistry
from base0.configs.filecoin import FilecoinSettings

logger = logging.getLogger(__name__)


def get_content_registry(settings: FilecoinSettings) -> ContentRegistry:
    """Web3 registry when configured for it, otherwise the in-memory one."""
    if settings.registry_backend == "web3":
        from base0.boundary.chain.web3_registry import Web3ContentRegistry

        logger.info(
            f"{__name__}:get_content_registry - Using FilecoinCIDStore at "
            f"{settings.cid_store_address} on {settings.network}"
        )
        return Web3ContentRegistry(
            rpc_url=settings.effective_rpc_url,
            contract_address=settings.cid_store_address,
            private_key=settings.wallet_private_key or settings.deployer_private_key,
        )

    logger.info(f"{__name__}:get_content_registry - Using in-memory content registry")
    return InMemoryContentRegistry()
