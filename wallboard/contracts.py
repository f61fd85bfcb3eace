"""Immutable data contracts shared by the service, the client and the canvas."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenBaseModel(BaseModel):
    """Base model enforcing immutability after creation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Note(_FrozenBaseModel):
    """A note pinned to the wall."""

    id: str = Field(..., min_length=1)
    message: str
    name: str
    created_at: datetime = Field(..., alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC.

        SQLite drops timezone information on round trips, so values read back
        from the database arrive naive.
        """
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_payload(self) -> dict[str, object]:
        """Return the JSON shape used over HTTP and in the local store."""

        return {
            "id": self.id,
            "message": self.message,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
        }


class NoteDraft(_FrozenBaseModel):
    """Message and author submitted when creating or editing a note."""

    message: str = ""
    name: str | None = None


__all__ = ["Note", "NoteDraft"]
