"""JWT token handling.

Token diterbitkan oleh layanan login. Service ini hanya memverifikasi tanda
tangan dan membaca klaim identitas (`sub`, `role`, `nama`, dan untuk
mahasiswa `kelas`/`prodi`/`angkatan`).
"""

from datetime import datetime, timedelta
from typing import Dict, Optional, Any
from jose import jwt

from src.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = {k: v for k, v in data.items() if v is not None}
    to_encode.setdefault("type", "access")

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode["exp"] = expire

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(token: str) -> Dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.JWTError as e:
        raise jwt.JWTError(f"Token validation failed: {str(e)}")
