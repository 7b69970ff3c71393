"""Enums untuk workflow kompensasi."""

from enum import Enum
from typing import Dict, Set


class StatusKompensasi(str, Enum):
    """Status pengajuan kompensasi kelas."""
    PENDING_ADMIN_REVIEW = "pending_admin_review"
    ADMIN_VERIFIED = "admin_verified"
    ADMIN_REJECTED = "admin_rejected"

    @classmethod
    def terminal_statuses(cls) -> Set["StatusKompensasi"]:
        return {cls.ADMIN_VERIFIED, cls.ADMIN_REJECTED}

    def is_terminal(self) -> bool:
        return self in StatusKompensasi.terminal_statuses()

    def allowed_transitions(self) -> Set["StatusKompensasi"]:
        return _TRANSITIONS[self]

    @classmethod
    def get_display_name(cls, status: str) -> str:
        """Get display name untuk status."""
        display_map = {
            cls.PENDING_ADMIN_REVIEW.value: "Menunggu Review Admin",
            cls.ADMIN_VERIFIED.value: "Disetujui Admin",
            cls.ADMIN_REJECTED.value: "Ditolak Admin",
        }
        return display_map.get(status, status)


_TRANSITIONS: Dict[StatusKompensasi, Set[StatusKompensasi]] = {
    StatusKompensasi.PENDING_ADMIN_REVIEW: {
        StatusKompensasi.ADMIN_VERIFIED,
        StatusKompensasi.ADMIN_REJECTED,
    },
    StatusKompensasi.ADMIN_VERIFIED: set(),
    StatusKompensasi.ADMIN_REJECTED: set(),
}


class KeputusanReview(str, Enum):
    """Keputusan admin saat mereview pengajuan."""
    VERIFY = "verify"
    REJECT = "reject"

    def target_status(self) -> StatusKompensasi:
        if self == KeputusanReview.VERIFY:
            return StatusKompensasi.ADMIN_VERIFIED
        return StatusKompensasi.ADMIN_REJECTED


class SemesterType(str, Enum):
    """Semester akademik."""
    GANJIL = "Ganjil"
    GENAP = "Genap"
