# ===== src/services/ringkasan_kompensasi.py =====
"""Service untuk ringkasan dan riwayat pengajuan kompensasi."""

from typing import AsyncIterator, Optional

from src.core.config import settings
from src.models.kompensasi_enums import StatusKompensasi
from src.repositories.kompensasi import KompensasiRepository
from src.schemas.filters import RiwayatFilterParams
from src.schemas.kompensasi import (
    KompensasiResponse, KompensasiListResponse, RingkasanKompensasiResponse
)
from src.services.kompensasi import build_kompensasi_response


class RingkasanKompensasiService:
    """
    Proyeksi baca untuk dashboard dan audit.

    Tidak ada cache: setiap pemanggilan membaca ulang dari database.
    """

    def __init__(self, kompensasi_repo: KompensasiRepository):
        self.kompensasi_repo = kompensasi_repo

    async def count_by_status(self) -> RingkasanKompensasiResponse:
        counts = await self.kompensasi_repo.count_by_status()
        pending = counts.get(StatusKompensasi.PENDING_ADMIN_REVIEW, 0)
        riwayat = sum(counts.get(status, 0) for status in StatusKompensasi.terminal_statuses())
        return RingkasanKompensasiResponse(
            pending=pending,
            riwayat=riwayat,
            total=sum(counts.values())
        )

    async def list_history(self, filters: RiwayatFilterParams) -> KompensasiListResponse:
        """Satu halaman riwayat, terbaru dulu."""
        total = await self.kompensasi_repo.count_history(filters.kelas_id, filters.status)
        rows = await self.kompensasi_repo.get_history_page(
            offset=(filters.page - 1) * filters.size,
            limit=filters.size,
            kelas_id=filters.kelas_id,
            status=filters.status
        )
        return KompensasiListResponse.create(
            items=[build_kompensasi_response(row) for row in rows],
            total=total,
            page=filters.page,
            size=filters.size
        )

    async def iter_history(
        self,
        kelas_id: Optional[str] = None,
        status: Optional[StatusKompensasi] = None,
        batch_size: Optional[int] = None
    ) -> AsyncIterator[KompensasiResponse]:
        """
        Iterasi seluruh riwayat per batch tanpa memuat semuanya sekaligus.

        Iterasi berhenti kapan saja tanpa efek samping, dan pemanggilan baru
        mulai lagi dari awal.
        """
        batch_size = batch_size or settings.HISTORY_STREAM_BATCH_SIZE
        offset = 0
        while True:
            rows = await self.kompensasi_repo.get_history_page(
                offset=offset, limit=batch_size, kelas_id=kelas_id, status=status
            )
            for row in rows:
                yield build_kompensasi_response(row)
            if len(rows) < batch_size:
                break
            offset += batch_size
