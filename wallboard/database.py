"""Async engine construction and per-request sessions."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator, cast

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from wallboard.auth.models import AuthBase
from wallboard.config import DatabaseConfig
from wallboard.notes.models import NotesBase

LOGGER = logging.getLogger(__name__)


def _ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""

    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def build_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create the async engine shared by notes and the admin gate."""

    _ensure_sqlite_directory(config.url)
    return create_async_engine(config.url, echo=config.echo, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_schema(engine: AsyncEngine) -> None:
    """Create every table that does not exist yet."""

    async with engine.begin() as connection:
        await connection.run_sync(NotesBase.metadata.create_all)
        await connection.run_sync(AuthBase.metadata.create_all)
    LOGGER.info("Database schema ready", extra={"url": engine.url.render_as_string(hide_password=True)})


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a database session bound to the application engine."""

    session_factory = cast(async_sessionmaker[AsyncSession], request.app.state.session_factory)
    async with session_factory() as session:
        yield session


__all__ = ["build_engine", "build_session_factory", "get_db_session", "init_schema"]
