"""Service layer validating and storing wall notes."""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from wallboard.config import NotesConfig
from wallboard.contracts import Note, NoteDraft
from wallboard.notes.models import NoteRecord
from wallboard.notes.repository import NoteRepository

LOGGER = logging.getLogger(__name__)


class NoteServiceError(RuntimeError):
    """Raised when a note operation cannot be completed."""

    def __init__(self, message: str, reason: str = "bad_request") -> None:
        super().__init__(message)
        self.reason = reason


class NoteService:
    """Coordinate validation and repository access for notes."""

    def __init__(self, config: NotesConfig, repository: NoteRepository) -> None:
        self._config = config
        self._repository = repository

    @staticmethod
    def _to_note(record: NoteRecord) -> Note:
        return Note(
            id=record.id,
            message=record.message,
            name=record.name,
            created_at=record.created_at,
        )

    def normalize(self, draft: NoteDraft) -> Tuple[str, str]:
        """Trim a draft and apply the default author name.

        Raises:
            NoteServiceError: If the message is blank or either field is too long.
        """

        message = (draft.message or "").strip()
        if not message:
            raise NoteServiceError("Message is required")
        if len(message) > self._config.message_max_length:
            raise NoteServiceError(
                f"Message cannot exceed {self._config.message_max_length} characters"
            )
        name = (draft.name or "").strip() or self._config.default_name
        if len(name) > self._config.name_max_length:
            raise NoteServiceError(f"Name cannot exceed {self._config.name_max_length} characters")
        return message, name

    async def list_notes(self) -> List[Note]:
        """Return all notes, newest first."""

        records = await self._repository.list_newest_first()
        return [self._to_note(record) for record in records]

    async def create_note(self, draft: NoteDraft) -> Note:
        """Validate and persist a new note."""

        message, name = self.normalize(draft)
        try:
            record = await self._repository.create(message, name)
            await self._repository.commit()
        except SQLAlchemyError as exc:
            await self._repository.rollback()
            LOGGER.exception("Failed to create note")
            raise NoteServiceError("Failed to create note", reason="internal") from exc
        LOGGER.info("Note created", extra={"note_id": record.id})
        return self._to_note(record)

    async def update_note(self, note_id: str, draft: NoteDraft) -> Note:
        """Replace the message and author of an existing note."""

        message, name = self.normalize(draft)
        record = await self._repository.get(note_id)
        if record is None:
            raise NoteServiceError("Note not found", reason="not_found")
        try:
            record = await self._repository.update(record, message=message, name=name)
            await self._repository.commit()
        except SQLAlchemyError as exc:
            await self._repository.rollback()
            LOGGER.exception("Failed to update note %s", note_id)
            raise NoteServiceError("Failed to update note", reason="internal") from exc
        return self._to_note(record)

    async def delete_note(self, note_id: str) -> None:
        """Remove a note from the wall."""

        record = await self._repository.get(note_id)
        if record is None:
            raise NoteServiceError("Note not found", reason="not_found")
        try:
            await self._repository.delete(record)
            await self._repository.commit()
        except SQLAlchemyError as exc:
            await self._repository.rollback()
            LOGGER.exception("Failed to delete note %s", note_id)
            raise NoteServiceError("Failed to delete note", reason="internal") from exc
        LOGGER.info("Note removed", extra={"note_id": note_id})


__all__ = ["NoteService", "NoteServiceError"]
