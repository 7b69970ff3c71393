"""Enums untuk role pengguna - MATCH DATABASE UPPERCASE."""

from enum import Enum


class UserRole(str, Enum):
    """Role yang diberikan identity provider di dalam token."""
    ADMIN = "ADMIN"              # Admin jurusan
    SEKRETARIS = "SEKRETARIS"    # Sekretaris kelas (mahasiswa)
    MAHASISWA = "MAHASISWA"
    DOSEN = "DOSEN"

    @classmethod
    def get_all_values(cls):
        """Get all role values as list."""
        return [role.value for role in cls]

    @classmethod
    def is_valid_role(cls, role: str) -> bool:
        """Check if role is valid."""
        return role in cls.get_all_values()
