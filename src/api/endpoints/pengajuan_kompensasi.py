# ===== src/api/endpoints/pengajuan_kompensasi.py =====
"""API endpoints untuk pengajuan, review dan riwayat kompensasi."""

import json
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.models.enums import UserRole
from src.models.kompensasi_enums import StatusKompensasi
from src.repositories.dosen import DosenRepository
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.repositories.kompen_info import KompenInfoRepository
from src.repositories.kompensasi import KompensasiRepository
from src.repositories.mahasiswa import MahasiswaRepository
from src.services.kompensasi import KompensasiService
from src.services.ringkasan_kompensasi import RingkasanKompensasiService
from src.schemas.kompensasi import (
    PengajuanCreate, PengajuanReview, KompensasiResponse, KompensasiListResponse,
    StatusKelasResponse, RingkasanKompensasiResponse
)
from src.schemas.filters import RiwayatFilterParams
from src.auth.permissions import (
    require_roles, admin_required, sekretaris_required, dosen_required
)

router = APIRouter()

pengajuan_viewer = require_roles([UserRole.ADMIN, UserRole.DOSEN, UserRole.SEKRETARIS])


async def get_kompensasi_service(session: AsyncSession = Depends(get_db)) -> KompensasiService:
    """Dependency untuk KompensasiService."""
    return KompensasiService(
        KompensasiRepository(session),
        KompenInfoRepository(session),
        KelasDosenPARepository(session),
        DosenRepository(session),
        MahasiswaRepository(session)
    )


async def get_ringkasan_service(session: AsyncSession = Depends(get_db)) -> RingkasanKompensasiService:
    """Dependency untuk RingkasanKompensasiService."""
    return RingkasanKompensasiService(KompensasiRepository(session))


def _own_kelas_id(current_user: dict) -> str:
    kelas_id = current_user.get("kelas_id")
    if not kelas_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token sekretaris tidak memuat data kelas"
        )
    return kelas_id


# ===== CREATE OPERATIONS =====

@router.post("/", response_model=KompensasiResponse, status_code=status.HTTP_201_CREATED)
async def create_pengajuan(
    data: PengajuanCreate,
    current_user: dict = Depends(sekretaris_required),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """
    Ajukan kompensasi untuk kelas sendiri.

    **Accessible by**: Sekretaris kelas

    **Business Rules** (dicek berurutan):
    1. Sesi kompensasi harus aktif (409 SESSION_CLOSED)
    2. Tidak ada pengajuan pending untuk kelas (409 DUPLICATE_SUBMISSION)
    3. Kelas sudah punya Dosen PA (409 NO_REVIEWER_ASSIGNED)
    """
    if data.kelas_id != _own_kelas_id(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sekretaris hanya dapat mengajukan kompensasi untuk kelasnya sendiri"
        )
    return await kompensasi_service.submit(data.kelas_id, current_user["id"])


# ===== READ OPERATIONS =====

@router.get("/pending", response_model=List[KompensasiResponse])
async def get_pending_pengajuan(
    current_user: dict = Depends(admin_required),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """Antrian review admin, pengajuan paling lama di depan."""
    return await kompensasi_service.list_pending()


@router.get("/riwayat", response_model=KompensasiListResponse)
async def get_riwayat_pengajuan(
    filters: RiwayatFilterParams = Depends(),
    current_user: dict = Depends(admin_required),
    ringkasan_service: RingkasanKompensasiService = Depends(get_ringkasan_service)
):
    """
    Riwayat pengajuan yang sudah direview (disetujui / ditolak), terbaru dulu.

    **Accessible by**: Admin only
    """
    return await ringkasan_service.list_history(filters)


@router.get("/riwayat/stream")
async def stream_riwayat_pengajuan(
    kelas_id: Optional[str] = Query(None),
    status_filter: Optional[StatusKompensasi] = Query(None, alias="status"),
    current_user: dict = Depends(admin_required),
    ringkasan_service: RingkasanKompensasiService = Depends(get_ringkasan_service)
):
    """
    Seluruh riwayat sebagai NDJSON (satu pengajuan per baris) untuk export.

    **Accessible by**: Admin only
    """
    if status_filter is not None and not status_filter.is_terminal():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Riwayat hanya berisi status admin_verified atau admin_rejected"
        )

    async def generate():
        async for pengajuan in ringkasan_service.iter_history(kelas_id=kelas_id, status=status_filter):
            yield json.dumps(pengajuan.model_dump(mode="json")) + "\n"

    return StreamingResponse(generate(), media_type="application/x-ndjson")


@router.get("/ringkasan", response_model=RingkasanKompensasiResponse)
async def get_ringkasan_pengajuan(
    current_user: dict = Depends(admin_required),
    ringkasan_service: RingkasanKompensasiService = Depends(get_ringkasan_service)
):
    """Jumlah pengajuan pending, riwayat dan total."""
    return await ringkasan_service.count_by_status()


@router.get("/kelas-saya", response_model=StatusKelasResponse)
async def get_status_kelas_saya(
    current_user: dict = Depends(sekretaris_required),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """Pengajuan terakhir dan Dosen PA untuk kelas sekretaris."""
    return await kompensasi_service.get_class_status(_own_kelas_id(current_user))


@router.get("/dosen-pa/saya", response_model=List[KompensasiResponse])
async def get_pengajuan_dosen_pa(
    current_user: dict = Depends(dosen_required),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """Pengajuan kelas bimbingan Dosen PA yang sedang login, terbaru dulu."""
    return await kompensasi_service.list_for_reviewer(current_user["id"])


@router.get("/{pengajuan_id}", response_model=KompensasiResponse)
async def get_pengajuan(
    pengajuan_id: str,
    current_user: dict = Depends(pengajuan_viewer),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """
    Get pengajuan by ID.

    **Accessible by**: Admin, Dosen PA dari pengajuan, sekretaris kelas pengajuan
    """
    pengajuan = await kompensasi_service.get_pengajuan_or_404(pengajuan_id)

    role = current_user["role"]
    if role == UserRole.DOSEN and pengajuan.id_dosen_pa != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pengajuan bukan milik kelas bimbingan Anda")
    if role == UserRole.SEKRETARIS and pengajuan.kelas_id != current_user.get("kelas_id"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pengajuan bukan milik kelas Anda")

    return pengajuan


# ===== UPDATE OPERATIONS =====

@router.put("/{pengajuan_id}/review", response_model=KompensasiResponse)
async def review_pengajuan(
    pengajuan_id: str,
    data: PengajuanReview,
    current_user: dict = Depends(admin_required),
    kompensasi_service: KompensasiService = Depends(get_kompensasi_service)
):
    """
    Verifikasi atau tolak pengajuan.

    **Accessible by**: Admin only

    **Business Rules**:
    - Hanya pengajuan pending yang bisa direview (409 INVALID_STATE)
    - Status akhir tidak bisa diubah lagi
    """
    return await kompensasi_service.review(pengajuan_id, data, current_user["id"])
