"""Repository untuk penugasan Dosen PA per kelas."""

from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.kelas_dosen_pa import KelasDosenPA
from src.utils.db_retry import retry_read_once


class KelasDosenPARepository:
    """Repository untuk operasi kelas_dosen_pa."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ===== READ OPERATIONS =====

    async def get_by_kelas_id(self, kelas_id: str) -> Optional[KelasDosenPA]:
        """Get penugasan by kelas ID."""
        query = select(KelasDosenPA).where(KelasDosenPA.kelas_id == kelas_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_dosen_pa_id(self, kelas_id: str) -> Optional[str]:
        """Get ID Dosen PA yang saat ini ditugaskan untuk kelas."""
        query = select(KelasDosenPA.id_dosen_pa).where(KelasDosenPA.kelas_id == kelas_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_kelas_ids(self, kelas_ids: List[str]) -> List[KelasDosenPA]:
        """Get penugasan untuk sekumpulan kelas."""
        if not kelas_ids:
            return []
        query = select(KelasDosenPA).where(KelasDosenPA.kelas_id.in_(kelas_ids))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @retry_read_once
    async def get_page(self, offset: int, limit: int) -> List[KelasDosenPA]:
        """Get satu halaman kelas yang dikelola, urut kelas, prodi, angkatan."""
        query = (
            select(KelasDosenPA)
            .order_by(KelasDosenPA.kelas, KelasDosenPA.prodi, KelasDosenPA.angkatan)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    # ===== WRITE OPERATIONS =====

    async def create(
        self,
        kelas_id: str,
        kelas: str,
        prodi: str,
        angkatan: str,
        created_by: Optional[str] = None
    ) -> KelasDosenPA:
        """Tambah kelas ke pengelolaan tanpa Dosen PA."""
        row = KelasDosenPA(
            kelas_id=kelas_id,
            kelas=kelas,
            prodi=prodi,
            angkatan=angkatan,
            id_dosen_pa=None,
            created_by=created_by,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return row

    async def replace_assignment(
        self,
        kelas_id: str,
        kelas: str,
        prodi: str,
        angkatan: str,
        id_dosen_pa: str,
        assigned_by: Optional[str] = None
    ) -> KelasDosenPA:
        """
        Ganti penugasan kelas dalam satu transaksi: hapus row lama lalu insert
        row baru, sehingga tidak pernah ada dua row untuk kelas yang sama.
        """
        existing = await self.get_by_kelas_id(kelas_id)
        if existing is not None:
            await self.session.delete(existing)
            await self.session.flush()

        now = utcnow()
        row = KelasDosenPA(
            kelas_id=kelas_id,
            kelas=kelas,
            prodi=prodi,
            angkatan=angkatan,
            id_dosen_pa=id_dosen_pa,
            created_by=assigned_by,
            updated_by=assigned_by,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return row

    async def delete(self, kelas_id: str) -> bool:
        """Hapus kelas dari pengelolaan. Pengajuan yang ada tidak tersentuh."""
        result = await self.session.execute(
            delete(KelasDosenPA)
            .where(KelasDosenPA.kelas_id == kelas_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount > 0
