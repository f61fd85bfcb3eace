"""Admin password gate guarding note edits and removals."""

from wallboard.auth.service import AdminAuthError, AdminAuthService
from wallboard.auth.utils import JWTManager

__all__ = ["AdminAuthError", "AdminAuthService", "JWTManager"]
