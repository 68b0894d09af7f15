"""
Generated image CRUD operations.

Provides per-wallet and per-prompt queries for GeneratedImageModel.

Dependencies: sqlalchemy, base0.boundary.db.models
System role: Image history persistence
"""

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from base0.boundary.db.CRUD.base_crud import BaseCRUD
from base0.boundary.db.models.image_model import GeneratedImageModel


class ImageCRUD(BaseCRUD[GeneratedImageModel]):
    """
    CRUD operations for GeneratedImageModel.

    Extends BaseCRUD with queries filtering by wallet and by prompt,
    ordered newest first.
    """

    def __init__(self) -> None:
        """Initialize ImageCRUD with GeneratedImageModel."""
        super().__init__(GeneratedImageModel)

    async def get_by_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
    ) -> Sequence[GeneratedImageModel]:
        """
        Retrieve a wallet's images, newest first.

        Args:
            session: Async database session
            user_id: Wallet address
            limit: Maximum number of images to return

        Returns:
            Sequence of GeneratedImageModel ordered by timestamp descending
        """
        stmt = (
            select(GeneratedImageModel)
            .where(GeneratedImageModel.user_id == user_id)
            .order_by(desc(GeneratedImageModel.timestamp), desc(GeneratedImageModel.created_at))
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_prompt_id(
        self,
        session: AsyncSession,
        user_id: str,
        prompt_id: str,
    ) -> Sequence[GeneratedImageModel]:
        """
        Retrieve the images generated for one prompt, newest first.

        Args:
            session: Async database session
            user_id: Wallet address
            prompt_id: Prompt id

        Returns:
            Sequence of GeneratedImageModel for the prompt
        """
        stmt = (
            select(GeneratedImageModel)
            .where(
                (GeneratedImageModel.user_id == user_id)
                & (GeneratedImageModel.prompt_id == prompt_id)
            )
            .order_by(desc(GeneratedImageModel.timestamp))
        )
        result = await session.execute(stmt)
        return result.scalars().all()


image_crud = ImageCRUD()
