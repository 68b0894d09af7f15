"""
Wallet CID index ORM model.

Dependencies: sqlalchemy, base0.boundary.db.base
System role: Append-only per-wallet list of stored piece CIDs
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from base0.boundary.db.base import Base, TimestampMixin


class WalletCidModel(Base, TimestampMixin):
    """
    One entry of a wallet's CID index.

    Rows are only ever inserted; the autoincrement id preserves insertion
    order. Duplicate CIDs are allowed, matching the client-side array.
    """

    __tablename__ = "wallet_cids"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wallet_address: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    cid: Mapped[str] = mapped_column(String(256), nullable=False)
