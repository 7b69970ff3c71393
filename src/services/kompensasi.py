# ===== src/services/kompensasi.py =====
"""Service untuk pengajuan kompensasi (Submission Workflow)."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.exceptions import (
    ConflictError,
    DuplicateSubmissionError,
    InvalidStateError,
    NoReviewerAssignedError,
    NotFoundError,
    SessionClosedError,
)
from src.repositories.dosen import DosenRepository
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.repositories.kompen_info import KompenInfoRepository
from src.repositories.kompensasi import KompensasiRepository, KompensasiRow
from src.repositories.mahasiswa import MahasiswaRepository
from src.schemas.kompensasi import (
    PengajuanReview, KompensasiResponse, StatusKelasResponse
)

logger = logging.getLogger(__name__)


def build_kompensasi_response(row: KompensasiRow) -> KompensasiResponse:
    """Build response dari (kompensasi, nama_sekretaris, nama_dosen_pa)."""
    kompensasi, nama_sekretaris, nama_dosen_pa = row
    return KompensasiResponse(
        id=kompensasi.id,
        kelas_id=kompensasi.kelas_id,
        id_sekretaris=kompensasi.id_sekretaris,
        nama_sekretaris=nama_sekretaris,
        id_dosen_pa=kompensasi.id_dosen_pa,
        nama_dosen_pa=nama_dosen_pa,
        status=kompensasi.status,
        status_display=kompensasi.get_status_display(),
        is_terminal=kompensasi.is_terminal(),
        semester=kompensasi.semester,
        tahun_ajaran=kompensasi.tahun_ajaran,
        catatan_admin=kompensasi.catatan_admin,
        created_at=kompensasi.created_at,
        updated_at=kompensasi.updated_at,
        reviewed_by=kompensasi.updated_by if kompensasi.is_terminal() else None
    )


class KompensasiService:
    """Service untuk alur pengajuan dan review kompensasi."""

    def __init__(
        self,
        kompensasi_repo: KompensasiRepository,
        kompen_info_repo: KompenInfoRepository,
        kelas_dosen_pa_repo: KelasDosenPARepository,
        dosen_repo: DosenRepository,
        mahasiswa_repo: MahasiswaRepository
    ):
        self.kompensasi_repo = kompensasi_repo
        self.kompen_info_repo = kompen_info_repo
        self.kelas_dosen_pa_repo = kelas_dosen_pa_repo
        self.dosen_repo = dosen_repo
        self.mahasiswa_repo = mahasiswa_repo

    async def submit(self, kelas_id: str, id_sekretaris: str) -> KompensasiResponse:
        """
        Ajukan kompensasi untuk kelas.

        Workflow:
        1. Sesi kompensasi harus aktif
        2. Tidak boleh ada pengajuan pending untuk kelas yang sama
        3. Kelas harus sudah punya Dosen PA
        4. Insert pengajuan pending dengan snapshot Dosen PA dan periode sesi

        Urutan pengecekan ini menentukan error mana yang diterima caller jika
        beberapa kondisi gagal sekaligus.
        """
        # 1. Session gate
        sesi = await self.kompen_info_repo.get_current()
        if sesi is None or not sesi.is_active:
            raise SessionClosedError()

        # 2. Satu pengajuan pending per kelas
        pending = await self.kompensasi_repo.get_pending_by_kelas(kelas_id)
        if pending is not None:
            raise DuplicateSubmissionError(kelas_id, pending.id)

        # 3. Dosen PA
        id_dosen_pa = await self.kelas_dosen_pa_repo.get_dosen_pa_id(kelas_id)
        if id_dosen_pa is None:
            raise NoReviewerAssignedError(kelas_id)

        # 4. Insert
        try:
            kompensasi = await self.kompensasi_repo.create(
                kelas_id=kelas_id,
                id_sekretaris=id_sekretaris,
                id_dosen_pa=id_dosen_pa,
                semester=sesi.semester,
                tahun_ajaran=sesi.tahun_ajaran
            )
        except IntegrityError:
            await self.kompensasi_repo.session.rollback()
            # Pengajuan lain untuk kelas ini masuk di antara langkah 2 dan 4
            if await self.kompensasi_repo.get_pending_by_kelas(kelas_id) is not None:
                logger.warning(
                    "Pengajuan bersamaan terdeteksi oleh unique index",
                    extra={"kelas_id": kelas_id, "user_id": id_sekretaris}
                )
                raise ConflictError(
                    f"Kelas {kelas_id} baru saja mengajukan kompensasi dari proses lain",
                    details={"kelas_id": kelas_id}
                )
            if await self.mahasiswa_repo.get_by_id(id_sekretaris) is None:
                logger.warning(
                    "Pengaju tidak terdaftar sebagai mahasiswa",
                    extra={"kelas_id": kelas_id, "user_id": id_sekretaris}
                )
                raise NotFoundError("Sekretaris", id_sekretaris)
            logger.error("Gagal menyimpan pengajuan kompensasi", exc_info=True, extra={"kelas_id": kelas_id})
            raise
        except SQLAlchemyError:
            await self.kompensasi_repo.session.rollback()
            logger.error("Gagal menyimpan pengajuan kompensasi", exc_info=True, extra={"kelas_id": kelas_id})
            raise

        logger.info(
            "Pengajuan kompensasi dibuat",
            extra={"kelas_id": kelas_id, "pengajuan_id": kompensasi.id, "user_id": id_sekretaris}
        )
        return await self.get_pengajuan_or_404(kompensasi.id)

    async def review(
        self,
        pengajuan_id: str,
        data: PengajuanReview,
        admin_id: Optional[str] = None
    ) -> KompensasiResponse:
        """
        Verifikasi atau tolak pengajuan pending.

        Update memakai kondisi `status = pending`; jika dua admin mereview
        bersamaan, yang kalah mendapat InvalidStateError.
        """
        kompensasi = await self.kompensasi_repo.get_by_id(pengajuan_id)
        if kompensasi is None:
            raise NotFoundError("Pengajuan kompensasi", pengajuan_id)

        new_status = data.keputusan.target_status()
        if not kompensasi.can_transition_to(new_status):
            raise InvalidStateError(pengajuan_id, kompensasi.status.value)

        try:
            updated = await self.kompensasi_repo.transition_from_pending(
                pengajuan_id, new_status, reviewed_by=admin_id, catatan=data.catatan
            )
        except SQLAlchemyError:
            await self.kompensasi_repo.session.rollback()
            logger.error("Gagal menyimpan review pengajuan", exc_info=True, extra={"pengajuan_id": pengajuan_id})
            raise

        if not updated:
            current = await self.kompensasi_repo.get_by_id(pengajuan_id)
            if current is None:
                raise NotFoundError("Pengajuan kompensasi", pengajuan_id)
            raise InvalidStateError(pengajuan_id, current.status.value)

        logger.info(
            f"Pengajuan kompensasi direview: {new_status.value}",
            extra={
                "kelas_id": kompensasi.kelas_id,
                "pengajuan_id": pengajuan_id,
                "user_id": admin_id,
                "status": new_status.value
            }
        )
        return await self.get_pengajuan_or_404(pengajuan_id)

    async def get_pengajuan_or_404(self, pengajuan_id: str) -> KompensasiResponse:
        row = await self.kompensasi_repo.get_with_names(pengajuan_id)
        if row is None:
            raise NotFoundError("Pengajuan kompensasi", pengajuan_id)
        return build_kompensasi_response(row)

    async def list_pending(self) -> List[KompensasiResponse]:
        """Antrian review admin, pengajuan paling lama di depan."""
        rows = await self.kompensasi_repo.get_pending_with_names()
        return [build_kompensasi_response(row) for row in rows]

    async def list_for_reviewer(self, id_dosen_pa: str) -> List[KompensasiResponse]:
        """Pengajuan yang snapshot Dosen PA-nya adalah dosen ini."""
        rows = await self.kompensasi_repo.get_by_dosen_with_names(id_dosen_pa)
        return [build_kompensasi_response(row) for row in rows]

    async def get_class_status(self, kelas_id: str) -> StatusKelasResponse:
        """Pengajuan terakhir kelas dan Dosen PA yang saat ini ditugaskan."""
        latest = await self.kompensasi_repo.get_latest_by_kelas(kelas_id)
        id_dosen_pa = await self.kelas_dosen_pa_repo.get_dosen_pa_id(kelas_id)
        names = await self.dosen_repo.get_names([id_dosen_pa]) if id_dosen_pa else {}

        pengajuan_terakhir = build_kompensasi_response(latest) if latest else None
        return StatusKelasResponse(
            kelas_id=kelas_id,
            id_dosen_pa=id_dosen_pa,
            nama_dosen_pa=names.get(id_dosen_pa) if id_dosen_pa else None,
            can_submit=pengajuan_terakhir is None or pengajuan_terakhir.is_terminal,
            pengajuan_terakhir=pengajuan_terakhir
        )
