"""Repository handling persistence for admin credentials."""
from __future__ import annotations

from typing import Optional, Sequence

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wallboard.auth.models import AdminAccount


def build_password_context(schemes: Sequence[str] = ("bcrypt",)) -> CryptContext:
    """Return the passlib context used to hash admin passwords."""

    return CryptContext(schemes=list(schemes), deprecated="auto")


class AdminRepository:
    """Provide database access helpers for the admin gate."""

    def __init__(self, session: AsyncSession, pwd_context: Optional[CryptContext] = None) -> None:
        self._session = session
        self._pwd_context = pwd_context or build_password_context()

    @property
    def session(self) -> AsyncSession:
        """Return the underlying SQLAlchemy session."""

        return self._session

    def hash_password(self, password: str) -> str:
        """Hash the provided password."""

        return self._pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify whether a plaintext password matches a stored hash."""

        if not hashed_password:
            return False
        return self._pwd_context.verify(plain_password, hashed_password)

    async def get_admin(self, username: str) -> Optional[AdminAccount]:
        """Retrieve the admin account with the given username."""

        normalized = username.strip().lower()
        result = await self._session.execute(
            select(AdminAccount).where(AdminAccount.username == normalized)
        )
        return result.scalar_one_or_none()

    async def set_password(self, username: str, password: str) -> AdminAccount:
        """Create the admin account or replace its password."""

        account = await self.get_admin(username)
        hashed = self.hash_password(password)
        if account is None:
            account = AdminAccount(username=username.strip().lower(), hashed_password=hashed)
            self._session.add(account)
        else:
            account.hashed_password = hashed
        await self._session.flush()
        return account

    async def commit(self) -> None:
        """Commit the current transaction."""

        await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""

        await self._session.rollback()


__all__ = ["AdminRepository", "build_password_context"]
