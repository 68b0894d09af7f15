"""
Database table creation.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, base0.configs
System role: Database schema initialization

Usage:
    python -m base0.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from base0.boundary.db.base import Base
from base0.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from base0.boundary.db.models.prompt_model import UserPromptModel  # noqa: F401
from base0.boundary.db.models.image_model import GeneratedImageModel  # noqa: F401
from base0.boundary.db.models.wallet_cid_model import WalletCidModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Engine to use; defaults to the configured application engine
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Tables ready: {sorted(Base.metadata.tables)}")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning(f"{__name__}:drop_all_tables - All tables dropped")


if __name__ == "__main__":
    asyncio.run(create_all_tables())
