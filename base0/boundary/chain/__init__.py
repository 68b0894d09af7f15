"""
Content registry boundary.

Exports:
  - ContentRegistry: Pay-to-unlock registry contract
  - InMemoryContentRegistry: Process-local implementation
  - get_content_registry: Settings-driven selection

Web3ContentRegistry lives in base0.boundary.chain.web3_registry and is
imported on demand.
"""

from base0.boundary.chain.factory import get_content_registry
from base0.boundary.chain.memory_registry import InMemoryContentRegistry
from base0.boundary.chain.registry import (
    ACCESS_DURATION_SECONDS,
    ACCESS_EXPIRED,
    PLATFORM_FEE_PERCENTAGE,
    PURCHASE_REQUIRED,
    ContentRegistry,
)

__all__ = [
    "ACCESS_DURATION_SECONDS",
    "ACCESS_EXPIRED",
    "PLATFORM_FEE_PERCENTAGE",
    "PURCHASE_REQUIRED",
    "ContentRegistry",
    "InMemoryContentRegistry",
    "get_content_registry",
]
