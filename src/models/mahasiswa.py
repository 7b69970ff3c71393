"""Model mahasiswa - sumber data Class Registry (read-only untuk workflow)."""

from typing import Optional
from sqlmodel import Field, SQLModel
import uuid as uuid_lib

from src.models.base import BaseModel


class Mahasiswa(BaseModel, SQLModel, table=True):
    """Data mahasiswa; kombinasi kelas + prodi + angkatan membentuk kelas."""

    __tablename__ = "mahasiswa"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )
    nim: str = Field(max_length=20, unique=True, index=True)
    nama: str = Field(max_length=200, index=True)
    kelas: str = Field(max_length=20, index=True, description="Nama kelas, misal 3A")
    prodi: str = Field(max_length=100, description="Program studi")
    angkatan: str = Field(max_length=4, description="Tahun angkatan")
    jabatan_kelas: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Jabatan di kelas, misal Sekretaris"
    )

    def __repr__(self) -> str:
        return f"<Mahasiswa(nim={self.nim}, kelas={self.kelas}, prodi={self.prodi}, angkatan={self.angkatan})>"
