"""Schemas untuk pengajuan kompensasi dan ringkasannya."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from src.models.kompensasi_enums import StatusKompensasi, KeputusanReview, SemesterType
from src.schemas.shared import BaseListResponse


# ===== REQUEST SCHEMAS =====

class PengajuanCreate(BaseModel):
    """Schema untuk sekretaris mengajukan kompensasi kelas."""

    kelas_id: str = Field(..., min_length=1, max_length=150, description="Composite ID kelas-prodi-angkatan")


class PengajuanReview(BaseModel):
    """Schema untuk admin memverifikasi / menolak pengajuan."""

    keputusan: KeputusanReview = Field(..., description="verify atau reject")
    catatan: Optional[str] = Field(None, max_length=1000, description="Catatan admin (opsional)")


# ===== RESPONSE SCHEMAS =====

class KompensasiResponse(BaseModel):
    """Schema response pengajuan kompensasi."""

    id: str
    kelas_id: str
    id_sekretaris: str
    nama_sekretaris: Optional[str] = None
    id_dosen_pa: str
    nama_dosen_pa: Optional[str] = None

    status: StatusKompensasi
    status_display: str
    is_terminal: bool

    semester: Optional[SemesterType] = None
    tahun_ajaran: Optional[str] = None
    catatan_admin: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None
    reviewed_by: Optional[str] = Field(None, description="ID admin yang mereview")

    model_config = ConfigDict(from_attributes=True)


class KompensasiListResponse(BaseListResponse[KompensasiResponse]):
    """Standardized kompensasi list response."""
    pass


class StatusKelasResponse(BaseModel):
    """Status kompensasi kelas untuk dashboard sekretaris."""

    kelas_id: str
    id_dosen_pa: Optional[str] = None
    nama_dosen_pa: Optional[str] = None
    can_submit: bool = Field(description="True jika tidak ada pengajuan pending")
    pengajuan_terakhir: Optional[KompensasiResponse] = None


class RingkasanKompensasiResponse(BaseModel):
    """Jumlah pengajuan per kelompok status."""

    pending: int = Field(description="Menunggu review admin")
    riwayat: int = Field(description="admin_verified + admin_rejected")
    total: int
