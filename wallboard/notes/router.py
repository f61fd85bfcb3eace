"""FastAPI router exposing the wall's notes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from wallboard.auth.router import require_admin
from wallboard.auth.schemas import AdminSession
from wallboard.config import NotesConfig
from wallboard.contracts import Note, NoteDraft
from wallboard.database import get_db_session
from wallboard.notes.repository import NoteRepository
from wallboard.notes.service import NoteService, NoteServiceError
from wallboard.utils.errors import status_from_reason

router = APIRouter(prefix="/api/notes", tags=["notes"])


def get_notes_config(request: Request) -> NotesConfig:
    """Resolve the notes configuration from the application state."""

    return request.app.state.app_config.notes


async def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    config: NotesConfig = Depends(get_notes_config),
) -> NoteService:
    """Construct a NoteService for the current request."""

    return NoteService(config, NoteRepository(session))


def _raise_http(exc: NoteServiceError) -> HTTPException:
    return HTTPException(status_code=status_from_reason(exc.reason), detail=str(exc))


@router.get("", response_model=List[Note], summary="List notes, newest first")
async def list_notes(service: NoteService = Depends(get_note_service)) -> List[Note]:
    """Return every note on the wall."""

    return await service.list_notes()


@router.post("", response_model=Note, status_code=status.HTTP_201_CREATED, summary="Pin a note")
async def create_note(payload: NoteDraft, service: NoteService = Depends(get_note_service)) -> Note:
    """Create a new note; the author defaults to the configured anonymous name."""

    try:
        return await service.create_note(payload)
    except NoteServiceError as exc:
        raise _raise_http(exc) from exc


@router.put("/{note_id}", response_model=Note, summary="Edit a note")
async def update_note(
    note_id: str,
    payload: NoteDraft,
    service: NoteService = Depends(get_note_service),
    _admin: AdminSession = Depends(require_admin),
) -> Note:
    """Replace a note's message and author. Requires an admin token."""

    try:
        return await service.update_note(note_id, payload)
    except NoteServiceError as exc:
        raise _raise_http(exc) from exc


@router.delete("/{note_id}", summary="Remove a note")
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
    _admin: AdminSession = Depends(require_admin),
) -> dict[str, str]:
    """Remove a note from the wall. Requires an admin token."""

    try:
        await service.delete_note(note_id)
    except NoteServiceError as exc:
        raise _raise_http(exc) from exc
    return {"message": "Note removed"}


__all__ = ["router", "get_note_service"]
