"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - UserPromptModel, GeneratedImageModel, WalletCidModel: History entities
  - prompt_crud, image_crud, wallet_cid_crud: CRUD operation singletons
  - storage_key(): Legacy per-wallet key names

Dependencies: sqlalchemy, base0.configs
System role: Database adapter providing persistent prompt/image history
"""

from base0.boundary.db.base import Base, TimestampMixin
from base0.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from base0.boundary.db.models import GeneratedImageModel, UserPromptModel, WalletCidModel
from base0.boundary.db.CRUD import (
    BaseCRUD,
    ImageCRUD,
    PromptCRUD,
    WalletCidCRUD,
    image_crud,
    prompt_crud,
    wallet_cid_crud,
)
from base0.boundary.db.storage_keys import storage_key

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "UserPromptModel",
    "GeneratedImageModel",
    "WalletCidModel",
    # CRUD classes
    "BaseCRUD",
    "PromptCRUD",
    "ImageCRUD",
    "WalletCidCRUD",
    # CRUD singletons
    "prompt_crud",
    "image_crud",
    "wallet_cid_crud",
    "storage_key",
]
