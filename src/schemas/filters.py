"""Filter schemas untuk list endpoints kompensasi."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.models.kompensasi_enums import StatusKompensasi


class KelasFilterParams(BaseModel):
    """Filter daftar kelas di halaman Dosen PA."""

    search: Optional[str] = Field(None, description="Search by kelas, prodi, angkatan atau nama Dosen PA")
    has_dosen_pa: Optional[bool] = Field(None, description="Filter kelas yang sudah / belum punya Dosen PA")

    @field_validator('search')
    @classmethod
    def validate_search(cls, search: Optional[str]) -> Optional[str]:
        """Validate and clean search term."""
        if search is not None:
            search = search.strip()
            if not search:
                return None
            if len(search) > 100:
                raise ValueError("Search term too long (max 100 characters)")
        return search


class RiwayatFilterParams(BaseModel):
    """Filter riwayat pengajuan (status terminal)."""

    page: int = Field(1, ge=1, description="Page number")
    size: int = Field(20, ge=1, le=100, description="Page size (max 100)")
    kelas_id: Optional[str] = Field(None, description="Filter by kelas")
    status: Optional[StatusKompensasi] = Field(None, description="admin_verified atau admin_rejected")

    @field_validator('status')
    @classmethod
    def validate_terminal_status(cls, status: Optional[StatusKompensasi]) -> Optional[StatusKompensasi]:
        if status is not None and not status.is_terminal():
            raise ValueError("Riwayat hanya berisi status admin_verified atau admin_rejected")
        return status
