"""Model dosen - direktori reviewer (Dosen PA)."""

from typing import Optional
from sqlmodel import Field, SQLModel
import uuid as uuid_lib

from src.models.base import BaseModel


class Dosen(BaseModel, SQLModel, table=True):
    """Data dosen yang dapat ditugaskan sebagai Dosen PA."""

    __tablename__ = "dosen"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )
    nip: Optional[str] = Field(default=None, max_length=30, index=True)
    nama: str = Field(max_length=200, index=True)
    prodi: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True, description="Hanya dosen aktif yang bisa menjadi Dosen PA")

    def __repr__(self) -> str:
        return f"<Dosen(nip={self.nip}, nama={self.nama})>"
