"""Model pengajuan kompensasi kelas."""

from typing import Optional
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Index, Enum as SQLEnum, text
import uuid as uuid_lib

from src.models.base import BaseModel
from src.models.kompensasi_enums import StatusKompensasi, SemesterType

# SQLEnum menyimpan nama member (UPPERCASE) di database
_PENDING_ONLY = text("status = 'PENDING_ADMIN_REVIEW'")


class Kompensasi(BaseModel, SQLModel, table=True):
    """
    Satu pengajuan kompensasi per kelas.

    `id_dosen_pa`, `semester` dan `tahun_ajaran` adalah snapshot saat
    pengajuan dibuat dan tidak ikut berubah jika penugasan Dosen PA atau sesi
    berubah. Row tidak pernah dihapus.
    """

    __tablename__ = "kompensasi"
    __table_args__ = (
        # Maksimal satu pengajuan pending per kelas
        Index(
            "uq_kompensasi_pending_per_kelas",
            "kelas_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
    )

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )

    kelas_id: str = Field(index=True, max_length=150)

    id_sekretaris: str = Field(
        foreign_key="mahasiswa.id",
        index=True,
        max_length=36,
        description="Sekretaris kelas yang mengajukan"
    )

    id_dosen_pa: str = Field(
        foreign_key="dosen.id",
        index=True,
        max_length=36,
        description="Snapshot Dosen PA saat pengajuan dibuat"
    )

    status: StatusKompensasi = Field(
        default=StatusKompensasi.PENDING_ADMIN_REVIEW,
        sa_column=Column(
            SQLEnum(StatusKompensasi, name="kompensasi_status"),
            nullable=False,
            index=True,
        ),
    )

    semester: Optional[SemesterType] = Field(
        default=None,
        sa_column=Column(SQLEnum(SemesterType, name="semester_type"), nullable=True),
    )
    tahun_ajaran: Optional[str] = Field(default=None, max_length=20)

    catatan_admin: Optional[str] = Field(default=None, max_length=1000)

    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def can_transition_to(self, new_status: StatusKompensasi) -> bool:
        return new_status in self.status.allowed_transitions()

    def get_status_display(self) -> str:
        return StatusKompensasi.get_display_name(self.status.value)

    def __repr__(self) -> str:
        return f"<Kompensasi(kelas_id={self.kelas_id}, status={self.status.value})>"
