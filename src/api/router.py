"""API router configuration untuk workflow kompensasi."""

from fastapi import APIRouter

from src.api.endpoints import sesi_kompensasi, dosen_pa, pengajuan_kompensasi

# Create main API router
api_router = APIRouter()

api_router.include_router(
    sesi_kompensasi.router,
    prefix="/kompensasi/sesi",
    tags=["Kompensasi - Sesi"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Admin only for write operations"},
        404: {"description": "Sesi kompensasi belum dikonfigurasi"},
        422: {"description": "Validation Error"},
    }
)

api_router.include_router(
    dosen_pa.router,
    prefix="/kompensasi/dosen-pa",
    tags=["Kompensasi - Dosen PA"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Admin only"},
        404: {"description": "Kelas atau dosen not found"},
        409: {"description": "Kelas sudah terdaftar / penulisan bentrok"},
        422: {"description": "Validation Error"},
    }
)

api_router.include_router(
    pengajuan_kompensasi.router,
    prefix="/kompensasi/pengajuan",
    tags=["Kompensasi - Pengajuan"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Check role permissions"},
        404: {"description": "Pengajuan not found"},
        409: {"description": "Sesi tidak aktif, pengajuan ganda, Dosen PA kosong atau status tidak valid"},
        422: {"description": "Validation Error"},
    }
)

# ===== DOCUMENTATION METADATA =====

tags_metadata = [
    {
        "name": "Kompensasi - Sesi",
        "description": """
        **Sesi kompensasi (satu sesi aktif)**

        - Admin membuka / menutup sesi
        - Pengajuan baru hanya bisa dibuat saat sesi aktif
        """,
    },
    {
        "name": "Kompensasi - Dosen PA",
        "description": """
        **Penugasan Dosen PA per kelas**

        - Daftar kelas dari data mahasiswa dan kelas yang dikelola
        - Ganti Dosen PA tidak mengubah pengajuan yang sudah ada
        """,
    },
    {
        "name": "Kompensasi - Pengajuan",
        "description": """
        **Alur pengajuan kompensasi**

        - Sekretaris mengajukan untuk kelasnya
        - Admin memverifikasi atau menolak
        - Riwayat dan ringkasan untuk dashboard
        """,
    },
]


def get_tags_metadata():
    """Get tags metadata untuk OpenAPI documentation."""
    return tags_metadata
