"""
Wallet CID index CRUD operations.

Dependencies: sqlalchemy, base0.boundary.db.models
System role: Append-only CID index per wallet
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from base0.boundary.db.CRUD.base_crud import BaseCRUD
from base0.boundary.db.models.wallet_cid_model import WalletCidModel


class WalletCidCRUD(BaseCRUD[WalletCidModel]):
    """Append and list operations for the wallet CID index."""

    def __init__(self) -> None:
        """Initialize WalletCidCRUD with WalletCidModel."""
        super().__init__(WalletCidModel)

    async def append(self, session: AsyncSession, wallet_address: str, cid: str) -> WalletCidModel:
        """Append a CID to the end of a wallet's index."""
        return await self.create(session, wallet_address=wallet_address, cid=cid)

    async def list_cids(self, session: AsyncSession, wallet_address: str) -> list[str]:
        """Return a wallet's CIDs in insertion order."""
        stmt = (
            select(WalletCidModel.cid)
            .where(WalletCidModel.wallet_address == wallet_address)
            .order_by(WalletCidModel.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


wallet_cid_crud = WalletCidCRUD()
