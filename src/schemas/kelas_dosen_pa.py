"""Schemas untuk kelas dan penugasan Dosen PA."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, ConfigDict


# ===== REQUEST SCHEMAS =====

class KelasCreate(BaseModel):
    """Schema untuk menambahkan kelas ke pengelolaan Dosen PA."""

    kelas: str = Field(..., min_length=1, max_length=20)
    prodi: str = Field(..., min_length=1, max_length=100)
    angkatan: str = Field(..., min_length=4, max_length=4, description="Tahun angkatan, misal 2023")

    @field_validator('kelas', 'prodi', 'angkatan')
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Nama kelas, prodi, dan angkatan tidak boleh kosong")
        return value

    @field_validator('kelas', 'prodi')
    @classmethod
    def reject_id_separator(cls, value: str) -> str:
        # '-' memisahkan bagian kelas_id
        if '-' in value:
            raise ValueError("Nama kelas dan prodi tidak boleh mengandung '-'")
        return value

    @field_validator('angkatan')
    @classmethod
    def validate_angkatan(cls, angkatan: str) -> str:
        if not angkatan.isdigit():
            raise ValueError("Angkatan harus berupa tahun, misal 2023")
        return angkatan


class DosenPAAssign(BaseModel):
    """Schema untuk assign Dosen PA ke kelas."""

    id_dosen_pa: str = Field(..., min_length=1, max_length=36)


# ===== RESPONSE SCHEMAS =====

class KelasDosenPAResponse(BaseModel):
    """Satu kelas beserta Dosen PA (jika ada)."""

    kelas_id: str
    kelas: str
    prodi: str
    angkatan: str
    id_dosen_pa: Optional[str] = None
    nama_dosen_pa: Optional[str] = None
    is_managed: bool = Field(description="True jika kelas punya row penugasan")
    has_dosen_pa: bool

    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DosenResponse(BaseModel):
    """Data dosen untuk pilihan Dosen PA."""

    id: str
    nip: Optional[str] = None
    nama: str
    prodi: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
