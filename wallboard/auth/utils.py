"""JWT helpers for admin sessions."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from wallboard.config import AuthJWTConfig

ADMIN_SCOPE = "notes:admin"


class JWTManager:
    """Helper for encoding and decoding JSON Web Tokens."""

    def __init__(self, config: AuthJWTConfig) -> None:
        self._config = config

    @property
    def access_token_ttl(self) -> timedelta:
        return self._config.access_token_ttl

    def create_access_token(
        self,
        subject: str,
        additional_claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """Create a signed JWT access token."""

        now = issued_at or datetime.now(timezone.utc)
        ttl = expires_delta or self._config.access_token_ttl
        expire_at = now + ttl
        payload: Dict[str, Any] = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int(expire_at.timestamp()),
        }
        if additional_claims:
            payload.update(additional_claims)
        return jwt.encode(payload, self._config.secret_key, algorithm=self._config.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode and validate a JWT."""

        return jwt.decode(token, self._config.secret_key, algorithms=[self._config.algorithm])


__all__ = ["ADMIN_SCOPE", "JWTError", "JWTManager"]
