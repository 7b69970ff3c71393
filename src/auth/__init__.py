"""Auth module init."""

from .jwt import create_access_token, verify_token
from .permissions import (
    get_current_user,
    require_roles,
    admin_required,
    sekretaris_required,
    dosen_required
)

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_user",
    "require_roles",
    "admin_required",
    "sekretaris_required",
    "dosen_required"
]
