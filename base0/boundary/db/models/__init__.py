"""
Database models package.

Exports:
  - UserPromptModel: Prompt history rows
  - GeneratedImageModel: Generated image rows
  - WalletCidModel: Append-only wallet CID index rows

Dependencies: sqlalchemy, base0.boundary.db.base
System role: Database model definitions for history entities
"""

from base0.boundary.db.models.prompt_model import UserPromptModel
from base0.boundary.db.models.image_model import GeneratedImageModel
from base0.boundary.db.models.wallet_cid_model import WalletCidModel

__all__ = [
    "UserPromptModel",
    "GeneratedImageModel",
    "WalletCidModel",
]
