# ===== src/api/endpoints/sesi_kompensasi.py =====
"""API endpoints untuk sesi kompensasi."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.kompen_info import KompenInfoRepository
from src.services.kompen_info import KompenInfoService
from src.schemas.kompen_info import KompenInfoOpen, KompenInfoUpdate, KompenInfoResponse
from src.auth.permissions import get_current_user, admin_required

router = APIRouter()


async def get_kompen_info_service(session: AsyncSession = Depends(get_db)) -> KompenInfoService:
    """Dependency untuk KompenInfoService."""
    return KompenInfoService(KompenInfoRepository(session))


@router.get("/", response_model=KompenInfoResponse)
async def get_sesi_kompensasi(
    current_user: dict = Depends(get_current_user),
    kompen_info_service: KompenInfoService = Depends(get_kompen_info_service)
):
    """
    Get sesi kompensasi saat ini.

    **Accessible by**: Semua user yang login

    **Returns**: Informasi sesi, atau `is_configured=false` jika admin belum
    pernah membuat sesi.
    """
    return await kompen_info_service.get_current_session()


@router.post("/buka", response_model=KompenInfoResponse)
async def buka_sesi_kompensasi(
    data: KompenInfoOpen,
    current_user: dict = Depends(admin_required),
    kompen_info_service: KompenInfoService = Depends(get_kompen_info_service)
):
    """
    Buka sesi kompensasi.

    **Accessible by**: Admin only

    **Business Rules**:
    - Nomor surat wajib diisi
    - Informasi sesi sebelumnya di-overwrite
    - Tanggal mulai / selesai hanya informasi
    """
    return await kompen_info_service.open_session(data, current_user["id"])


@router.post("/tutup", response_model=KompenInfoResponse)
async def tutup_sesi_kompensasi(
    current_user: dict = Depends(admin_required),
    kompen_info_service: KompenInfoService = Depends(get_kompen_info_service)
):
    """
    Tutup sesi kompensasi.

    **Accessible by**: Admin only

    Pengajuan yang masih pending tetap bisa direview setelah sesi ditutup.
    """
    return await kompen_info_service.close_session(current_user["id"])


@router.post("/toggle", response_model=KompenInfoResponse)
async def toggle_sesi_kompensasi(
    current_user: dict = Depends(admin_required),
    kompen_info_service: KompenInfoService = Depends(get_kompen_info_service)
):
    """Aktifkan / nonaktifkan sesi dengan informasi sesi yang tersimpan."""
    return await kompen_info_service.toggle_session(current_user["id"])


@router.put("/", response_model=KompenInfoResponse)
async def update_sesi_kompensasi(
    data: KompenInfoUpdate,
    current_user: dict = Depends(admin_required),
    kompen_info_service: KompenInfoService = Depends(get_kompen_info_service)
):
    """
    Update informasi sesi (semester, tahun ajaran, nomor surat, tanggal).

    **Accessible by**: Admin only

    Status aktif tidak berubah lewat endpoint ini.
    """
    return await kompen_info_service.update_session_meta(data, current_user["id"])
