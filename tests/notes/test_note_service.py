"""Tests for note validation and persistence."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Tuple

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from wallboard.config import NotesConfig
from wallboard.contracts import NoteDraft
from wallboard.notes.models import NoteRecord, NotesBase
from wallboard.notes.repository import NoteRepository
from wallboard.notes.service import NoteService, NoteServiceError


async def _setup_service(config: NotesConfig | None = None) -> Tuple[NoteService, NoteRepository, AsyncEngine]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as connection:
        await connection.run_sync(NotesBase.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    repository = NoteRepository(session_factory())
    return NoteService(config or NotesConfig(), repository), repository, engine


def test_normalize_trims_and_defaults_name() -> None:
    service = NoteService(NotesConfig(default_name="Someone"), repository=None)  # type: ignore[arg-type]

    assert service.normalize(NoteDraft(message="  hi  ", name=None)) == ("hi", "Someone")
    assert service.normalize(NoteDraft(message="hi", name="  Ada ")) == ("hi", "Ada")


def test_normalize_limits_are_inclusive() -> None:
    service = NoteService(NotesConfig(message_max_length=5, name_max_length=3), repository=None)  # type: ignore[arg-type]

    assert service.normalize(NoteDraft(message="12345", name="abc")) == ("12345", "abc")
    with pytest.raises(NoteServiceError) as message_error:
        service.normalize(NoteDraft(message="123456"))
    assert str(message_error.value) == "Message cannot exceed 5 characters"
    assert message_error.value.reason == "bad_request"
    with pytest.raises(NoteServiceError):
        service.normalize(NoteDraft(message="ok", name="abcd"))


def test_blank_message_is_rejected() -> None:
    service = NoteService(NotesConfig(), repository=None)  # type: ignore[arg-type]

    with pytest.raises(NoteServiceError) as excinfo:
        service.normalize(NoteDraft(message=" \n\t "))
    assert str(excinfo.value) == "Message is required"


def test_create_list_update_delete_round_trip() -> None:
    async def _run() -> None:
        service, repository, engine = await _setup_service()
        created = await service.create_note(NoteDraft(message="hello", name=""))
        assert created.name == "Anonymous"
        assert created.created_at.tzinfo is not None

        updated = await service.update_note(created.id, NoteDraft(message="changed", name="Ada"))
        assert updated.id == created.id
        assert updated.message == "changed"
        assert updated.name == "Ada"

        notes = await service.list_notes()
        assert [(note.id, note.message) for note in notes] == [(created.id, "changed")]
        assert notes[0].created_at.tzinfo is not None

        await service.delete_note(created.id)
        assert await service.list_notes() == []

        with pytest.raises(NoteServiceError) as excinfo:
            await service.delete_note(created.id)
        assert excinfo.value.reason == "not_found"
        with pytest.raises(NoteServiceError) as excinfo:
            await service.update_note(created.id, NoteDraft(message="again"))
        assert excinfo.value.reason == "not_found"

        await repository.session.close()
        await engine.dispose()

    asyncio.run(_run())


def test_list_orders_newest_first_with_id_tiebreak() -> None:
    async def _run() -> None:
        service, repository, engine = await _setup_service()
        base = datetime(2024, 5, 1, tzinfo=timezone.utc)
        repository.session.add_all(
            [
                NoteRecord(id="aaa", message="old", name="x", created_at=base),
                NoteRecord(id="bbb", message="new", name="x", created_at=base + timedelta(hours=1)),
                NoteRecord(id="ccc", message="old twin", name="x", created_at=base),
            ]
        )
        await repository.commit()

        notes = await service.list_notes()

        assert [note.id for note in notes] == ["bbb", "ccc", "aaa"]
        await repository.session.close()
        await engine.dispose()

    asyncio.run(_run())
