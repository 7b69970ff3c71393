"""Repository Class Registry - kelas diturunkan dari data mahasiswa."""

from typing import List, Optional, Tuple
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.mahasiswa import Mahasiswa
from src.utils.db_retry import retry_read_once


class MahasiswaRepository:
    """Read-only akses ke tabel mahasiswa."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, mahasiswa_id: str) -> Optional[Mahasiswa]:
        """Get mahasiswa by ID."""
        query = select(Mahasiswa).where(Mahasiswa.id == mahasiswa_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @retry_read_once
    async def get_distinct_kelas(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        angkatan: Optional[str] = None
    ) -> List[Tuple[str, str, str]]:
        """Get kombinasi unik (kelas, prodi, angkatan) yang lengkap."""
        conditions = [
            Mahasiswa.kelas != "",
            Mahasiswa.prodi != "",
            Mahasiswa.angkatan != "",
        ]
        if angkatan:
            conditions.append(Mahasiswa.angkatan == angkatan)

        query = (
            select(Mahasiswa.kelas, Mahasiswa.prodi, Mahasiswa.angkatan)
            .where(and_(*conditions))
            .distinct()
            .order_by(Mahasiswa.kelas, Mahasiswa.prodi, Mahasiswa.angkatan)
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]
