"""
Generated image ORM model.

Dependencies: sqlalchemy, base0.boundary.db.base
System role: Image history persistence keyed by wallet address
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from base0.boundary.db.base import Base, TimestampMixin


class GeneratedImageModel(Base, TimestampMixin):
    """
    An image produced for a prompt.

    ``prompt_id`` is a plain column rather than a foreign key: images are
    kept even when their prompt was never persisted (payment failures).

    Attributes:
        id: Image id (``img_<ms>_<rand>``)
        user_id: Wallet address
        prompt_id: Prompt the image was generated for
        image_url: Hosted image URL or data URI
        share_url: Provider share link
        deepai_id: Upstream generation id
        timestamp: Generation time (sort key, newest first)
        image_metadata: Free-form generation metadata (column ``metadata``)
    """

    __tablename__ = "generated_images"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    prompt_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    share_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    deepai_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    image_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
