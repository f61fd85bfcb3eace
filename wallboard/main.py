"""FastAPI application factory for The Wall backend."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from wallboard.auth.repository import AdminRepository, build_password_context
from wallboard.auth.router import require_admin, router as admin_router
from wallboard.auth.schemas import AdminSession
from wallboard.auth.service import AdminAuthService
from wallboard.auth.utils import JWTManager
from wallboard.canvas.router import router as canvas_router
from wallboard.config import AppConfig, load_config
from wallboard.database import build_engine, build_session_factory, init_schema
from wallboard.notes.router import router as notes_router

LOGGER = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Service health payload."""

    status: str
    timestamp: datetime
    version: str


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        config: Optional pre-loaded configuration. If omitted, the default
            configuration defined in config.yaml is used.

    Returns:
        FastAPI: Configured FastAPI application.
    """

    resolved_config = config or load_config()
    app = FastAPI(title=f"{resolved_config.app.name} API", version=resolved_config.app.version)
    app.state.app_config = resolved_config
    app.state.auth_config = resolved_config.auth
    app.state.jwt_manager = JWTManager(resolved_config.auth.jwt)

    bypass_flag = os.getenv("WALLBOARD_BYPASS_AUTH")
    if bypass_flag and bypass_flag.strip().lower() in {"1", "true", "yes"}:
        LOGGER.warning("Admin authentication bypass enabled; every request is treated as admin")

        async def _bypass_admin() -> AdminSession:
            return AdminSession(
                username=resolved_config.auth.admin_username,
                expires_at=datetime.max.replace(tzinfo=timezone.utc),
            )

        app.dependency_overrides[require_admin] = _bypass_admin

    engine = build_engine(resolved_config.database)
    session_factory = build_session_factory(engine)
    app.state.engine = engine
    app.state.session_factory = session_factory

    @app.on_event("startup")
    async def _init_database() -> None:
        await init_schema(engine)
        async with session_factory() as session:
            repository = AdminRepository(
                session, build_password_context(resolved_config.auth.password_schemes)
            )
            service = AdminAuthService(resolved_config.auth, repository, app.state.jwt_manager)
            await service.ensure_bootstrap_admin()

    @app.on_event("shutdown")
    async def _dispose_engine() -> None:
        await engine.dispose()

    allowed_origins = resolved_config.ui.allowed_origins
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/api/health", tags=["system"], summary="Service health probe", response_model=HealthResponse)
    def health() -> HealthResponse:
        """Return service health information."""

        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc),
            version=resolved_config.app.version,
        )

    app.include_router(notes_router)
    app.include_router(admin_router)
    app.include_router(canvas_router)
    return app


__all__ = ["create_app", "HealthResponse"]
