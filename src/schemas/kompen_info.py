"""Schemas untuk sesi kompensasi."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, ConfigDict

from src.models.base import as_utc
from src.models.kompensasi_enums import SemesterType


# ===== REQUEST SCHEMAS =====

class KompenInfoOpen(BaseModel):
    """Schema untuk membuka sesi kompensasi."""

    semester: SemesterType = Field(..., description="Ganjil atau Genap")
    tahun_ajaran: str = Field(..., max_length=20, description="Misal 2024/2025")
    nomor_surat: str = Field(..., max_length=100, description="Nomor surat rujukan (wajib)")
    start_at: Optional[datetime] = Field(None, description="Tanggal mulai (informasi)")
    end_at: Optional[datetime] = Field(None, description="Tanggal selesai (informasi)")

    @field_validator('start_at', 'end_at')
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class KompenInfoUpdate(BaseModel):
    """Schema untuk update informasi sesi tanpa mengubah status aktif."""

    semester: Optional[SemesterType] = None
    tahun_ajaran: Optional[str] = Field(None, max_length=20)
    nomor_surat: Optional[str] = Field(None, max_length=100)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None

    @field_validator('start_at', 'end_at')
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# ===== RESPONSE SCHEMAS =====

class KompenInfoResponse(BaseModel):
    """Schema response sesi kompensasi."""

    is_configured: bool = Field(description="False jika admin belum pernah membuat sesi")
    id: Optional[str] = None
    is_active: bool = False
    status_display: str = "Belum Dikonfigurasi"
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    semester: Optional[SemesterType] = None
    tahun_ajaran: Optional[str] = None
    nomor_surat: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def not_configured(cls) -> "KompenInfoResponse":
        return cls(is_configured=False)
