# ===== src/api/endpoints/dosen_pa.py =====
"""API endpoints untuk kelas dan penugasan Dosen PA."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.dosen import DosenRepository
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.repositories.mahasiswa import MahasiswaRepository
from src.services.dosen_pa import DosenPAService
from src.schemas.kelas_dosen_pa import (
    KelasCreate, DosenPAAssign, KelasDosenPAResponse, DosenResponse
)
from src.schemas.filters import KelasFilterParams
from src.schemas.common import SuccessResponse
from src.auth.permissions import admin_required

router = APIRouter()


async def get_dosen_pa_service(session: AsyncSession = Depends(get_db)) -> DosenPAService:
    """Dependency untuk DosenPAService."""
    return DosenPAService(
        KelasDosenPARepository(session),
        MahasiswaRepository(session),
        DosenRepository(session)
    )


@router.get("/kelas", response_model=List[KelasDosenPAResponse])
async def get_all_kelas(
    filters: KelasFilterParams = Depends(),
    current_user: dict = Depends(admin_required),
    dosen_pa_service: DosenPAService = Depends(get_dosen_pa_service)
):
    """
    Get semua kelas beserta Dosen PA.

    **Accessible by**: Admin only

    **Query Parameters**:
    - search: Search by kelas, prodi, angkatan atau nama Dosen PA
    - has_dosen_pa: Filter kelas yang sudah / belum punya Dosen PA
    """
    return await dosen_pa_service.list_classes(filters)


@router.post("/kelas", response_model=KelasDosenPAResponse, status_code=status.HTTP_201_CREATED)
async def create_kelas(
    data: KelasCreate,
    current_user: dict = Depends(admin_required),
    dosen_pa_service: DosenPAService = Depends(get_dosen_pa_service)
):
    """
    Tambahkan kelas ke pengelolaan Dosen PA (tanpa Dosen PA).

    **Accessible by**: Admin only
    """
    return await dosen_pa_service.register_class(data, current_user["id"])


@router.put("/kelas/{kelas_id}", response_model=KelasDosenPAResponse)
async def assign_dosen_pa(
    kelas_id: str,
    data: DosenPAAssign,
    current_user: dict = Depends(admin_required),
    dosen_pa_service: DosenPAService = Depends(get_dosen_pa_service)
):
    """
    Tugaskan / ganti Dosen PA untuk kelas.

    **Accessible by**: Admin only

    Pengajuan yang sudah ada tetap memakai Dosen PA saat pengajuan dibuat.
    """
    return await dosen_pa_service.assign_reviewer(kelas_id, data.id_dosen_pa, current_user["id"])


@router.delete("/kelas/{kelas_id}", response_model=SuccessResponse)
async def unassign_kelas(
    kelas_id: str,
    current_user: dict = Depends(admin_required),
    dosen_pa_service: DosenPAService = Depends(get_dosen_pa_service)
):
    """
    Hapus kelas dari pengelolaan Dosen PA.

    **Accessible by**: Admin only

    Pengajuan kompensasi kelas ini tidak dihapus.
    """
    await dosen_pa_service.unassign_class(kelas_id, current_user["id"])
    return SuccessResponse(
        message=f"Penugasan Dosen PA untuk kelas {kelas_id} berhasil dihapus",
        data={"kelas_id": kelas_id}
    )


@router.get("/dosen", response_model=List[DosenResponse])
async def get_dosen_options(
    current_user: dict = Depends(admin_required),
    dosen_pa_service: DosenPAService = Depends(get_dosen_pa_service)
):
    """Daftar dosen aktif untuk pilihan Dosen PA."""
    return await dosen_pa_service.list_reviewers()
