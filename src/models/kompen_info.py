"""Model untuk sesi kompensasi (kompen_info)."""

from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, Enum as SQLEnum
import uuid as uuid_lib

from src.models.base import BaseModel
from src.models.kompensasi_enums import SemesterType


class KompenInfo(BaseModel, SQLModel, table=True):
    """
    Sesi kompensasi yang diatur admin.

    Disimpan sebagai satu row yang di-overwrite setiap kali sesi dibuka ulang,
    bukan sebagai riwayat.
    """

    __tablename__ = "kompen_info"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )

    is_active: bool = Field(default=False, description="Sesi menerima pengajuan baru")

    # Informational only, tidak di-enforce terhadap jam server
    start_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True), description="Tanggal mulai sesi"
    )
    end_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True), description="Tanggal selesai sesi"
    )

    semester: SemesterType = Field(
        default=SemesterType.GANJIL,
        sa_column=Column(SQLEnum(SemesterType, name="semester_type"), nullable=False),
    )
    tahun_ajaran: str = Field(default="", max_length=20, description="Misal 2024/2025")
    nomor_surat: str = Field(default="", max_length=100, description="Nomor surat rujukan")

    def get_status_display(self) -> str:
        return "Aktif" if self.is_active else "Tidak Aktif"

    def __repr__(self) -> str:
        return f"<KompenInfo(active={self.is_active}, semester={self.semester}, tahun_ajaran={self.tahun_ajaran})>"
