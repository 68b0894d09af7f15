"""
Legacy per-wallet storage keys.

The web client kept each history array under a local-storage key derived from
the wallet address. The tables are keyed by address instead; these keys only
label the history export so older clients can re-import it.
"""

from typing import Literal

StorageKind = Literal["prompts", "images", "cids"]

KEY_PREFIX = "base0"


def storage_key(kind: StorageKind, address: str) -> str:
    """Return the key the web client used for one wallet's history array."""
    return f"{KEY_PREFIX}_{kind}_{address}"
