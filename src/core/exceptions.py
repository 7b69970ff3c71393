"""
Exception domain untuk workflow kompensasi.

Setiap error membawa pesan yang spesifik (bahasa Indonesia), kode error yang
stabil untuk frontend, dan HTTP status. Semua error ini recoverable: ditangani
oleh error handler dan dikembalikan ke caller, tidak pernah ditelan.

Usage:
    from src.core.exceptions import SessionClosedError

    if not sesi or not sesi.is_active:
        raise SessionClosedError()
"""

from typing import Any, Dict, Optional

from fastapi import status


class KompensasiError(Exception):
    """Base exception untuk semua error workflow kompensasi."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "KOMPENSASI_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "error_code": self.code,
            "details": self.details
        }


class ValidationError(KompensasiError):
    """Input tidak valid (misal nomor surat kosong)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "VALIDATION_ERROR"


class SessionClosedError(KompensasiError):
    """Pengajuan dibuat saat sesi kompensasi tidak aktif."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "SESSION_CLOSED"

    def __init__(self):
        super().__init__(
            "Sesi kompensasi sedang tidak aktif, pengajuan belum dapat dibuat"
        )


class DuplicateSubmissionError(KompensasiError):
    """Masih ada pengajuan yang menunggu review admin untuk kelas ini."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "DUPLICATE_SUBMISSION"

    def __init__(self, kelas_id: str, pengajuan_id: Optional[str] = None):
        super().__init__(
            f"Kelas {kelas_id} masih memiliki pengajuan yang menunggu review admin",
            details={"kelas_id": kelas_id, "pengajuan_id": pengajuan_id}
        )


class NoReviewerAssignedError(KompensasiError):
    """Kelas belum memiliki Dosen PA."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "NO_REVIEWER_ASSIGNED"

    def __init__(self, kelas_id: str):
        super().__init__(
            f"Belum ada Dosen PA yang ditugaskan untuk kelas {kelas_id}",
            details={"kelas_id": kelas_id}
        )


class NotFoundError(KompensasiError):
    """Resource dengan ID tertentu tidak ditemukan."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} tidak ditemukan"
        if resource_id:
            message = f"{resource} dengan ID '{resource_id}' tidak ditemukan"
        super().__init__(
            message,
            details={"resource": resource, "resource_id": resource_id}
        )


class InvalidStateError(KompensasiError):
    """Review dilakukan pada pengajuan yang sudah tidak pending."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "INVALID_STATE"

    def __init__(self, pengajuan_id: str, current_status: str):
        super().__init__(
            f"Pengajuan {pengajuan_id} sudah diproses (status: {current_status}) dan tidak dapat direview ulang",
            details={"pengajuan_id": pengajuan_id, "current_status": current_status}
        )


class ConflictError(KompensasiError):
    """Race penulisan terdeteksi di storage layer."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"

    def __init__(self, message: str = "Data telah diubah oleh proses lain. Silakan muat ulang dan coba lagi.", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class DuplicateClassError(ConflictError):
    """Kombinasi kelas, prodi dan angkatan sudah terdaftar."""

    default_code = "DUPLICATE_CLASS"

    def __init__(self, kelas_id: str):
        super().__init__(
            f"Kelas {kelas_id} sudah terdaftar",
            details={"kelas_id": kelas_id}
        )
