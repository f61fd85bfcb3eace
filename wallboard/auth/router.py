"""FastAPI router for the admin password gate."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from wallboard.auth.repository import AdminRepository, build_password_context
from wallboard.auth.schemas import AdminAuthRequest, AdminAuthResponse, AdminSession
from wallboard.auth.service import AdminAuthError, AdminAuthService
from wallboard.auth.utils import JWTManager
from wallboard.config import AuthConfig
from wallboard.database import get_db_session
from wallboard.utils.errors import status_from_reason

router = APIRouter(prefix="/api/admin", tags=["admin"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/auth", auto_error=False)


def get_auth_config(request: Request) -> AuthConfig:
    """Resolve the auth configuration from the application state."""

    return request.app.state.auth_config


def get_jwt_manager(request: Request) -> JWTManager:
    """Return the JWT manager stored on the app state."""

    return request.app.state.jwt_manager


async def get_admin_service(
    session: AsyncSession = Depends(get_db_session),
    config: AuthConfig = Depends(get_auth_config),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
) -> AdminAuthService:
    """Construct an AdminAuthService for the current request."""

    repository = AdminRepository(session, build_password_context(config.password_schemes))
    return AdminAuthService(config=config, repository=repository, jwt_manager=jwt_manager)


async def require_admin(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AdminAuthService = Depends(get_admin_service),
) -> AdminSession:
    """Validate the bearer token and return the admin session."""

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return service.verify_token(token)
    except AdminAuthError as exc:
        raise HTTPException(status_code=status_from_reason(exc.reason), detail=str(exc)) from exc


@router.post("/auth", response_model=AdminAuthResponse)
async def authenticate_admin(
    payload: AdminAuthRequest, service: AdminAuthService = Depends(get_admin_service)
) -> AdminAuthResponse:
    """Check the admin password and return a bearer token."""

    try:
        return await service.login(payload.password)
    except AdminAuthError as exc:
        raise HTTPException(status_code=status_from_reason(exc.reason), detail=str(exc)) from exc


@router.get("/session", response_model=AdminSession)
async def admin_session(session: AdminSession = Depends(require_admin)) -> AdminSession:
    """Return the admin session attached to the bearer token."""

    return session


__all__ = [
    "router",
    "get_admin_service",
    "get_auth_config",
    "get_jwt_manager",
    "require_admin",
]
