# ===== src/repositories/kompensasi.py =====
"""Repository untuk pengajuan kompensasi."""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import select, and_, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.kompensasi import Kompensasi
from src.models.kompensasi_enums import StatusKompensasi, SemesterType
from src.models.mahasiswa import Mahasiswa
from src.models.dosen import Dosen
from src.utils.db_retry import retry_read_once

# (kompensasi, nama_sekretaris, nama_dosen_pa)
KompensasiRow = Tuple[Kompensasi, Optional[str], Optional[str]]


class KompensasiRepository:
    """Repository untuk operasi kompensasi."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ===== CREATE OPERATIONS =====

    async def create(
        self,
        kelas_id: str,
        id_sekretaris: str,
        id_dosen_pa: str,
        semester: Optional[SemesterType],
        tahun_ajaran: Optional[str]
    ) -> Kompensasi:
        """Insert pengajuan baru dengan status pending_admin_review."""
        kompensasi = Kompensasi(
            kelas_id=kelas_id,
            id_sekretaris=id_sekretaris,
            id_dosen_pa=id_dosen_pa,
            status=StatusKompensasi.PENDING_ADMIN_REVIEW,
            semester=semester,
            tahun_ajaran=tahun_ajaran,
            created_by=id_sekretaris,
        )
        self.session.add(kompensasi)
        await self.session.commit()
        await self.session.refresh(kompensasi)
        return kompensasi

    # ===== READ OPERATIONS =====

    async def get_by_id(self, kompensasi_id: str) -> Optional[Kompensasi]:
        """Get kompensasi by ID."""
        query = (
            select(Kompensasi)
            .where(Kompensasi.id == kompensasi_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_pending_by_kelas(self, kelas_id: str) -> Optional[Kompensasi]:
        """Get pengajuan yang masih pending untuk kelas (maksimal satu)."""
        query = select(Kompensasi).where(
            and_(
                Kompensasi.kelas_id == kelas_id,
                Kompensasi.status == StatusKompensasi.PENDING_ADMIN_REVIEW
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_with_names(self, kompensasi_id: str) -> Optional[KompensasiRow]:
        """Get kompensasi beserta nama sekretaris dan Dosen PA."""
        query = self._with_names_query().where(Kompensasi.id == kompensasi_id)
        result = await self.session.execute(query)
        row = result.first()
        return (row[0], row[1], row[2]) if row else None

    async def get_latest_by_kelas(self, kelas_id: str) -> Optional[KompensasiRow]:
        """Get pengajuan terbaru untuk kelas."""
        query = (
            self._with_names_query()
            .where(Kompensasi.kelas_id == kelas_id)
            .order_by(Kompensasi.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        row = result.first()
        return (row[0], row[1], row[2]) if row else None

    async def get_pending_with_names(self) -> List[KompensasiRow]:
        """Antrian review admin, urut dari yang paling lama."""
        query = (
            self._with_names_query()
            .where(Kompensasi.status == StatusKompensasi.PENDING_ADMIN_REVIEW)
            .order_by(Kompensasi.created_at.asc())
        )
        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def get_by_dosen_with_names(self, dosen_id: str) -> List[KompensasiRow]:
        """Pengajuan yang ditujukan ke Dosen PA tertentu, terbaru dulu."""
        query = (
            self._with_names_query()
            .where(Kompensasi.id_dosen_pa == dosen_id)
            .order_by(Kompensasi.created_at.desc())
        )
        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    @retry_read_once
    async def get_history_page(
        self,
        offset: int,
        limit: int,
        kelas_id: Optional[str] = None,
        status: Optional[StatusKompensasi] = None
    ) -> List[KompensasiRow]:
        """Riwayat pengajuan terminal, terbaru dulu (updated_at lalu created_at)."""
        query = (
            self._with_names_query()
            .where(self._history_condition(kelas_id, status))
            .order_by(
                Kompensasi.updated_at.desc().nulls_last(),
                Kompensasi.created_at.desc(),
                Kompensasi.id
            )
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    @retry_read_once
    async def count_history(
        self,
        kelas_id: Optional[str] = None,
        status: Optional[StatusKompensasi] = None
    ) -> int:
        """Jumlah pengajuan terminal sesuai filter."""
        query = select(func.count(Kompensasi.id)).where(
            self._history_condition(kelas_id, status)
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    @retry_read_once
    async def count_by_status(self) -> Dict[StatusKompensasi, int]:
        """Jumlah pengajuan per status."""
        query = (
            select(Kompensasi.status, func.count(Kompensasi.id))
            .group_by(Kompensasi.status)
        )
        result = await self.session.execute(query)
        return {row[0]: row[1] for row in result.all()}

    # ===== UPDATE OPERATIONS =====

    async def transition_from_pending(
        self,
        kompensasi_id: str,
        new_status: StatusKompensasi,
        reviewed_by: Optional[str] = None,
        catatan: Optional[str] = None
    ) -> bool:
        """
        Pindahkan status dari pending ke status terminal.

        UPDATE bersyarat `WHERE status = pending` sehingga dari beberapa review
        yang berjalan bersamaan hanya satu yang mengubah row. Return False jika
        tidak ada row yang berubah (tidak ada atau sudah terminal).
        """
        query = (
            update(Kompensasi)
            .where(
                and_(
                    Kompensasi.id == kompensasi_id,
                    Kompensasi.status == StatusKompensasi.PENDING_ADMIN_REVIEW
                )
            )
            .values(
                status=new_status,
                catatan_admin=catatan,
                updated_at=utcnow(),
                updated_by=reviewed_by
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(query)
        await self.session.commit()
        return result.rowcount > 0

    # ===== HELPERS =====

    @staticmethod
    def _with_names_query():
        return (
            select(Kompensasi, Mahasiswa.nama, Dosen.nama)
            .outerjoin(Mahasiswa, Mahasiswa.id == Kompensasi.id_sekretaris)
            .outerjoin(Dosen, Dosen.id == Kompensasi.id_dosen_pa)
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _history_condition(
        kelas_id: Optional[str],
        status: Optional[StatusKompensasi]
    ):
        conditions = [Kompensasi.status.in_(list(StatusKompensasi.terminal_statuses()))]
        if status is not None:
            conditions.append(Kompensasi.status == status)
        if kelas_id:
            conditions.append(Kompensasi.kelas_id == kelas_id)
        return and_(*conditions)
