# ===== src/services/kompen_info.py =====
"""Service untuk sesi kompensasi (Session Controller)."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import NotFoundError, ValidationError
from src.models.base import as_utc
from src.models.kompen_info import KompenInfo
from src.repositories.kompen_info import KompenInfoRepository
from src.schemas.kompen_info import KompenInfoOpen, KompenInfoUpdate, KompenInfoResponse

logger = logging.getLogger(__name__)


class KompenInfoService:
    """
    Mengatur satu-satunya sesi kompensasi.

    Hanya flag `is_active` yang menentukan apakah pengajuan baru boleh dibuat.
    `start_at` / `end_at` bersifat informasi dan tidak dibandingkan dengan jam
    server.
    """

    def __init__(self, kompen_info_repo: KompenInfoRepository):
        self.kompen_info_repo = kompen_info_repo

    async def get_current_session(self) -> KompenInfoResponse:
        """Get sesi saat ini, atau sentinel `is_configured=False`."""
        kompen_info = await self.kompen_info_repo.get_current()
        if kompen_info is None:
            return KompenInfoResponse.not_configured()
        return self._build_response(kompen_info)

    async def is_session_active(self) -> bool:
        kompen_info = await self.kompen_info_repo.get_current()
        return kompen_info is not None and kompen_info.is_active

    async def open_session(self, data: KompenInfoOpen, user_id: Optional[str] = None) -> KompenInfoResponse:
        """
        Buka sesi kompensasi.

        Jika row sesi sudah ada, semua informasinya di-overwrite (bukan
        ditambah sebagai riwayat baru).
        """
        fields = data.model_dump()
        fields["nomor_surat"] = self._require_nomor_surat(fields.get("nomor_surat"))
        fields["tahun_ajaran"] = (fields.get("tahun_ajaran") or "").strip()
        self._validate_date_range(fields.get("start_at"), fields.get("end_at"))
        fields["is_active"] = True

        kompen_info = await self.kompen_info_repo.get_current()
        try:
            if kompen_info is None:
                kompen_info = await self.kompen_info_repo.create(fields, created_by=user_id)
            else:
                kompen_info = await self._update_or_404(kompen_info.id, fields, user_id)
        except SQLAlchemyError:
            await self._rollback_and_log("open_session")
            raise

        logger.info(
            f"Sesi kompensasi dibuka: {kompen_info.semester.value} {kompen_info.tahun_ajaran}",
            extra={"user_id": user_id}
        )
        return self._build_response(kompen_info)

    async def close_session(self, user_id: Optional[str] = None) -> KompenInfoResponse:
        """Tutup sesi. Pengajuan yang masih pending tetap bisa direview."""
        kompen_info = await self._get_current_or_404()
        try:
            kompen_info = await self._update_or_404(kompen_info.id, {"is_active": False}, user_id)
        except SQLAlchemyError:
            await self._rollback_and_log("close_session")
            raise

        logger.info("Sesi kompensasi ditutup", extra={"user_id": user_id})
        return self._build_response(kompen_info)

    async def toggle_session(self, user_id: Optional[str] = None) -> KompenInfoResponse:
        """Aktifkan / nonaktifkan sesi memakai informasi sesi yang tersimpan."""
        kompen_info = await self._get_current_or_404()
        if kompen_info.is_active:
            return await self.close_session(user_id)

        reopen = KompenInfoOpen(
            semester=kompen_info.semester,
            tahun_ajaran=kompen_info.tahun_ajaran,
            nomor_surat=kompen_info.nomor_surat,
            start_at=kompen_info.start_at,
            end_at=kompen_info.end_at,
        )
        return await self.open_session(reopen, user_id)

    async def update_session_meta(
        self,
        data: KompenInfoUpdate,
        user_id: Optional[str] = None
    ) -> KompenInfoResponse:
        """Update informasi sesi. Tidak pernah mengubah `is_active`."""
        kompen_info = await self._get_current_or_404()

        fields = data.model_dump(exclude_unset=True)
        if "nomor_surat" in fields:
            fields["nomor_surat"] = self._require_nomor_surat(fields["nomor_surat"])
        if "tahun_ajaran" in fields:
            fields["tahun_ajaran"] = (fields["tahun_ajaran"] or "").strip()
        if "semester" in fields and fields["semester"] is None:
            raise ValidationError("Semester tidak boleh kosong", details={"field": "semester"})
        self._validate_date_range(
            fields.get("start_at", kompen_info.start_at),
            fields.get("end_at", kompen_info.end_at)
        )

        if not fields:
            return self._build_response(kompen_info)

        try:
            kompen_info = await self._update_or_404(kompen_info.id, fields, user_id)
        except SQLAlchemyError:
            await self._rollback_and_log("update_session_meta")
            raise

        return self._build_response(kompen_info)

    # ===== HELPER METHODS =====

    async def _get_current_or_404(self) -> KompenInfo:
        kompen_info = await self.kompen_info_repo.get_current()
        if kompen_info is None:
            raise NotFoundError("Sesi kompensasi")
        return kompen_info

    async def _update_or_404(self, info_id: str, fields: dict, user_id: Optional[str]) -> KompenInfo:
        kompen_info = await self.kompen_info_repo.update_fields(info_id, fields, updated_by=user_id)
        if kompen_info is None:
            raise NotFoundError("Sesi kompensasi")
        return kompen_info

    async def _rollback_and_log(self, operation: str) -> None:
        logger.error(f"Gagal menyimpan sesi kompensasi ({operation})", exc_info=True)
        await self.kompen_info_repo.session.rollback()

    @staticmethod
    def _require_nomor_surat(nomor_surat: Optional[str]) -> str:
        nomor_surat = (nomor_surat or "").strip()
        if not nomor_surat:
            raise ValidationError(
                "Nomor surat wajib diisi sebelum sesi kompensasi dibuka",
                details={"field": "nomor_surat"}
            )
        return nomor_surat

    @staticmethod
    def _validate_date_range(start_at, end_at) -> None:
        start_at, end_at = as_utc(start_at), as_utc(end_at)
        if start_at and end_at and end_at < start_at:
            raise ValidationError(
                "Tanggal selesai tidak boleh sebelum tanggal mulai",
                details={"field": "end_at"}
            )

    @staticmethod
    def _build_response(kompen_info: KompenInfo) -> KompenInfoResponse:
        return KompenInfoResponse(
            is_configured=True,
            id=kompen_info.id,
            is_active=kompen_info.is_active,
            status_display=kompen_info.get_status_display(),
            start_at=kompen_info.start_at,
            end_at=kompen_info.end_at,
            semester=kompen_info.semester,
            tahun_ajaran=kompen_info.tahun_ajaran,
            nomor_surat=kompen_info.nomor_surat,
            created_at=kompen_info.created_at,
            updated_at=kompen_info.updated_at,
            updated_by=kompen_info.updated_by
        )
