"""SQLAlchemy ORM model for stored notes."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class NotesBase(DeclarativeBase):
    """Base declarative class for note tables."""


class NoteRecord(NotesBase):
    """A persisted wall note."""

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid4().hex)
    message: Mapped[str] = mapped_column(Text)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )


__all__ = ["NotesBase", "NoteRecord"]
