"""Repository handling persistence for wall notes."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wallboard.notes.models import NoteRecord


class NoteRepository:
    """Provide database access helpers for note records."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Return the underlying SQLAlchemy session."""

        return self._session

    async def create(self, message: str, name: str) -> NoteRecord:
        """Persist a new note."""

        record = NoteRecord(message=message, name=name)
        self._session.add(record)
        await self._session.flush()
        return record

    async def list_newest_first(self) -> List[NoteRecord]:
        """Return every note ordered by creation time, most recent first."""

        result = await self._session.execute(
            select(NoteRecord).order_by(NoteRecord.created_at.desc(), NoteRecord.id.desc())
        )
        return list(result.scalars().all())

    async def get(self, note_id: str) -> Optional[NoteRecord]:
        """Retrieve a note by identifier."""

        return await self._session.get(NoteRecord, note_id)

    async def update(self, record: NoteRecord, *, message: str, name: str) -> NoteRecord:
        """Overwrite the text of an existing note."""

        record.message = message
        record.name = name
        await self._session.flush()
        return record

    async def delete(self, record: NoteRecord) -> None:
        """Remove a note."""

        await self._session.delete(record)
        await self._session.flush()

    async def commit(self) -> None:
        """Commit the current transaction."""

        await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""

        await self._session.rollback()


__all__ = ["NoteRepository"]
