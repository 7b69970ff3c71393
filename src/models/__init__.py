"""Models initialization untuk workflow kompensasi."""

from .base import BaseModel, TimestampMixin, AuditMixin
from .enums import UserRole
from .kompensasi_enums import StatusKompensasi, KeputusanReview, SemesterType

# Read-only dependencies (Class Registry & reviewer directory)
from .mahasiswa import Mahasiswa
from .dosen import Dosen

# Workflow tables
from .kompen_info import KompenInfo
from .kelas_dosen_pa import KelasDosenPA, build_kelas_id
from .kompensasi import Kompensasi

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "AuditMixin",

    "UserRole",
    "StatusKompensasi",
    "KeputusanReview",
    "SemesterType",

    "Mahasiswa",
    "Dosen",

    "KompenInfo",
    "KelasDosenPA",
    "build_kelas_id",
    "Kompensasi",
]

# Table creation order (berdasarkan foreign key):
# 1. mahasiswa, dosen, kompen_info (no dependencies)
# 2. kelas_dosen_pa (depends on dosen)
# 3. kompensasi (depends on mahasiswa, dosen)
#
# Constraints:
# - kelas_dosen_pa.kelas_id PRIMARY KEY (satu Dosen PA per kelas)
# - kompensasi: UNIQUE (kelas_id) WHERE status = 'PENDING_ADMIN_REVIEW'
