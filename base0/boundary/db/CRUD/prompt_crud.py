"""
User prompt CRUD operations.

Dependencies: sqlalchemy, base0.boundary.db.models
System role: Prompt history persistence
"""

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from base0.boundary.db.CRUD.base_crud import BaseCRUD
from base0.boundary.db.models.prompt_model import UserPromptModel


class PromptCRUD(BaseCRUD[UserPromptModel]):
    """CRUD operations for UserPromptModel with per-wallet queries."""

    def __init__(self) -> None:
        """Initialize PromptCRUD with UserPromptModel."""
        super().__init__(UserPromptModel)

    async def get_by_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
    ) -> Sequence[UserPromptModel]:
        """
        Retrieve a wallet's prompts, newest first.

        Args:
            session: Async database session
            user_id: Wallet address
            limit: Maximum number of prompts to return

        Returns:
            Sequence of UserPromptModel ordered by timestamp descending
        """
        stmt = (
            select(UserPromptModel)
            .where(UserPromptModel.user_id == user_id)
            .order_by(desc(UserPromptModel.timestamp), desc(UserPromptModel.created_at))
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


prompt_crud = PromptCRUD()
