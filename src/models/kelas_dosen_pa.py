"""Model penugasan Dosen PA per kelas."""

from typing import Optional
from sqlmodel import Field, SQLModel

from src.models.base import BaseModel


def build_kelas_id(kelas: str, prodi: str, angkatan: str) -> str:
    """
    Composite ID kelas: '<kelas>-<prodi tanpa spasi>-<angkatan>'.

    Semua whitespace di prodi dibuang, jadi 'Teknik Kimia' dan 'TeknikKimia'
    menghasilkan ID yang sama dan dianggap satu kelas. '-' adalah pemisah,
    sehingga kelas yang ditambahkan admin tidak boleh mengandung '-'
    (lihat KelasCreate).
    """
    return "-".join([
        kelas.strip(),
        "".join(prodi.split()),
        angkatan.strip(),
    ])


class KelasDosenPA(BaseModel, SQLModel, table=True):
    """
    Mapping kelas -> Dosen PA.

    Satu row per kelas. Reassign mengganti row lama, unassign menghapus row
    tanpa menyentuh pengajuan yang sudah ada.
    """

    __tablename__ = "kelas_dosen_pa"

    kelas_id: str = Field(primary_key=True, max_length=150)
    kelas: str = Field(max_length=20)
    prodi: str = Field(max_length=100)
    angkatan: str = Field(max_length=4)

    id_dosen_pa: Optional[str] = Field(
        default=None,
        foreign_key="dosen.id",
        index=True,
        max_length=36,
        description="NULL jika kelas dikelola tapi belum ada Dosen PA"
    )

    def __repr__(self) -> str:
        return f"<KelasDosenPA(kelas_id={self.kelas_id}, dosen_pa={self.id_dosen_pa})>"
