"""Repository direktori dosen."""

from typing import Dict, Iterable, List, Optional
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.dosen import Dosen


class DosenRepository:
    """Read-only lookup dosen untuk penugasan dan tampilan."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_id(self, dosen_id: str) -> Optional[Dosen]:
        """Get dosen aktif (eligible sebagai Dosen PA)."""
        query = select(Dosen).where(and_(Dosen.id == dosen_id, Dosen.is_active.is_(True)))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all_active(self) -> List[Dosen]:
        """Get semua dosen aktif urut nama."""
        query = select(Dosen).where(Dosen.is_active.is_(True)).order_by(Dosen.nama)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_names(self, dosen_ids: Iterable[str]) -> Dict[str, str]:
        """Map id -> nama untuk sekumpulan dosen."""
        ids = {dosen_id for dosen_id in dosen_ids if dosen_id}
        if not ids:
            return {}
        query = select(Dosen.id, Dosen.nama).where(Dosen.id.in_(ids))
        result = await self.session.execute(query)
        return {row[0]: row[1] for row in result.all()}
