"""Service layer for the admin password gate."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from wallboard.auth.models import AdminAccount
from wallboard.auth.repository import AdminRepository
from wallboard.auth.schemas import AdminAuthResponse, AdminSession
from wallboard.auth.utils import ADMIN_SCOPE, JWTError, JWTManager
from wallboard.config import AuthConfig

LOGGER = logging.getLogger(__name__)


class AdminAuthError(RuntimeError):
    """Raised when admin authentication fails."""

    def __init__(self, message: str, reason: str = "unauthorized") -> None:
        super().__init__(message)
        self.reason = reason


class AdminAuthService:
    """Verify the admin password and issue short-lived admin tokens."""

    def __init__(
        self,
        config: AuthConfig,
        repository: AdminRepository,
        jwt_manager: JWTManager,
    ) -> None:
        self._config = config
        self._repository = repository
        self._jwt_manager = jwt_manager

    async def authenticate(self, password: str) -> bool:
        """Return whether ``password`` matches the stored admin credential."""

        account = await self._repository.get_admin(self._config.admin_username)
        if account is None:
            LOGGER.warning("Admin authentication attempted before an admin account exists")
            return False
        return self._repository.verify_password(password, account.hashed_password)

    async def login(self, password: str) -> AdminAuthResponse:
        """Exchange the admin password for a bearer token."""

        if not await self.authenticate(password):
            LOGGER.warning("Rejected admin authentication attempt")
            raise AdminAuthError("Incorrect password")
        ttl = self._jwt_manager.access_token_ttl
        token = self._jwt_manager.create_access_token(
            self._config.admin_username,
            additional_claims={"scope": ADMIN_SCOPE},
        )
        return AdminAuthResponse(
            success=True,
            access_token=token,
            expires_in=int(ttl.total_seconds()),
        )

    def verify_token(self, token: str) -> AdminSession:
        """Validate a bearer token issued by :meth:`login`."""

        try:
            claims = self._jwt_manager.decode(token)
        except JWTError as exc:
            raise AdminAuthError("Invalid or expired admin token") from exc
        if claims.get("scope") != ADMIN_SCOPE:
            raise AdminAuthError("Token does not grant admin access", reason="forbidden")
        subject = str(claims.get("sub") or "")
        if subject != self._config.admin_username:
            raise AdminAuthError("Token subject is not the admin account", reason="forbidden")
        expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        return AdminSession(username=subject, expires_at=expires_at)

    async def set_admin_password(self, password: str) -> AdminAccount:
        """Create the admin account or reset its password."""

        try:
            account = await self._repository.set_password(self._config.admin_username, password)
            await self._repository.commit()
        except SQLAlchemyError as exc:
            await self._repository.rollback()
            LOGGER.exception("Failed to store admin password")
            raise AdminAuthError("Unable to store admin password", reason="internal") from exc
        return account

    async def ensure_bootstrap_admin(self) -> bool:
        """Create the admin account from configuration when none exists yet."""

        password = self._config.bootstrap_admin_password
        if not password:
            return False
        existing = await self._repository.get_admin(self._config.admin_username)
        if existing is not None:
            return False
        await self.set_admin_password(password)
        LOGGER.info("Bootstrap admin account created", extra={"username": self._config.admin_username})
        return True


__all__ = ["AdminAuthError", "AdminAuthService"]
