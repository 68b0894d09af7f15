"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from base0.boundary.db.CRUD import prompt_crud, image_crud, wallet_cid_crud

    prompts = await prompt_crud.get_by_user(db, address)
"""

from base0.boundary.db.CRUD.base_crud import BaseCRUD
from base0.boundary.db.CRUD.prompt_crud import PromptCRUD, prompt_crud
from base0.boundary.db.CRUD.image_crud import ImageCRUD, image_crud
from base0.boundary.db.CRUD.wallet_cid_crud import WalletCidCRUD, wallet_cid_crud

__all__ = [
    "BaseCRUD",
    "PromptCRUD",
    "prompt_crud",
    "ImageCRUD",
    "image_crud",
    "WalletCidCRUD",
    "wallet_cid_crud",
]
