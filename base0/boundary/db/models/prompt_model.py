"""
User prompt ORM model.

Dependencies: sqlalchemy, base0.boundary.db.base
System role: Prompt history persistence keyed by wallet address
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from base0.boundary.db.base import Base, TimestampMixin


class UserPromptModel(Base, TimestampMixin):
    """
    A prompt a wallet submitted for generation.

    The primary key is the client-visible prompt id (``prompt_<ms>_<rand>``),
    so saving the same prompt twice updates the row in place.

    Attributes:
        id: Prompt id
        user_id: Wallet address of the author
        prompt: Prompt as typed by the user
        enhanced_prompt: Prompt actually sent upstream
        base_image_url: Optional reference image (data URI or URL)
        timestamp: When the prompt was generated (sort key, newest first)
        cid: Piece CID once pinned to Filecoin
        filecoin_url: Download URL for the pinned document
        prompt_metadata: width/height/version/preference (column ``metadata``)
    """

    __tablename__ = "user_prompts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    enhanced_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    base_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    cid: Mapped[str | None] = mapped_column(String(256), nullable=True)
    filecoin_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    prompt_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
