"""Authorization and permission checking - SINGLE ROLE SYSTEM.

Identitas diambil langsung dari token (identity provider eksternal). Semua
pengecekan role di workflow kompensasi lewat `require_roles`.
"""

from typing import List, Dict
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
import logging

from src.auth.jwt import verify_token
from src.models.enums import UserRole
from src.models.kelas_dosen_pa import build_kelas_id

logger = logging.getLogger(__name__)


class JWTBearer(HTTPBearer):
    """JWT Bearer handler yang selalu menjawab 401 jika token tidak ada."""

    def __init__(self):
        super(JWTBearer, self).__init__(auto_error=False)

    async def __call__(self, request: Request) -> str:
        credentials: HTTPAuthorizationCredentials = await super(
            JWTBearer, self
        ).__call__(request)

        if not credentials or credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated. Bearer token required.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return credentials.credentials


jwt_bearer = JWTBearer()


async def get_current_user(token: str = Depends(jwt_bearer)) -> Dict:
    """
    Get the current user from the JWT token.

    Returns dict dengan `id`, `nama`, `role` (UserRole) dan `kelas_id` untuk
    mahasiswa / sekretaris (None untuk role lain).
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
    except JWTError:
        raise credentials_exception

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not UserRole.is_valid_role(role):
        logger.info(f"Rejected token with sub={user_id!r} role={role!r}")
        raise credentials_exception

    kelas_id = None
    if payload.get("kelas") and payload.get("prodi") and payload.get("angkatan"):
        kelas_id = build_kelas_id(
            str(payload["kelas"]), str(payload["prodi"]), str(payload["angkatan"])
        )

    return {
        "id": user_id,
        "nama": payload.get("nama"),
        "role": UserRole(role),
        "kelas_id": kelas_id,
    }


def require_roles(required_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        required_roles: List of roles that are allowed access

    Returns:
        Dependency function that checks user role
    """
    async def _check_roles(
        current_user: Dict = Depends(get_current_user),
    ) -> Dict:
        user_role = current_user["role"]
        if user_role not in required_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"Access denied. Required roles: {', '.join(r.value for r in required_roles)}. "
                    f"Your role: {user_role.value}"
                ),
            )
        return current_user

    return _check_roles


# Common role dependencies
admin_required = require_roles([UserRole.ADMIN])
sekretaris_required = require_roles([UserRole.SEKRETARIS])
dosen_required = require_roles([UserRole.DOSEN])
