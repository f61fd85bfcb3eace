"""Tests for the HTTP client and its local fallback store."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from wallboard.client import STORAGE_KEY, LocalNoteStore, WallClient, WallClientError

BASE_URL = "http://wall.test/api"

REMOTE_NOTE = {
    "id": "remote-1",
    "message": "from the server",
    "name": "Ada",
    "createdAt": "2024-03-01T12:00:00+00:00",
}


def _client(tmp_path: Path, handler: Callable[[httpx.Request], httpx.Response]) -> WallClient:
    transport = httpx.MockTransport(handler)
    return WallClient(
        BASE_URL,
        LocalNoteStore(tmp_path / "local" / "wall-notes.json"),
        client=httpx.Client(transport=transport),
    )


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def test_list_notes_mirrors_server_response(tmp_path: Path) -> None:
    """A successful list is returned and mirrored to the local store."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/notes"
        return httpx.Response(200, json=[REMOTE_NOTE])

    client = _client(tmp_path, handler)
    notes = client.list_notes()

    assert [note.id for note in notes] == ["remote-1"]
    document = json.loads(client.store.path.read_text(encoding="utf-8"))
    assert document[STORAGE_KEY][0]["id"] == "remote-1"
    assert document[STORAGE_KEY][0]["createdAt"].startswith("2024-03-01T12:00:00")


def test_list_notes_falls_back_when_offline(tmp_path: Path) -> None:
    """Unreachable servers serve the last mirrored notes."""

    online = _client(tmp_path, lambda request: httpx.Response(200, json=[REMOTE_NOTE]))
    online.list_notes()

    offline = _client(tmp_path, _offline)
    notes = offline.list_notes()

    assert [note.message for note in notes] == ["from the server"]


def test_server_error_status_also_falls_back(tmp_path: Path) -> None:
    """A 5xx response reads the local store."""

    client = _client(tmp_path, lambda request: httpx.Response(500, json={"detail": "boom"}))

    assert client.list_notes() == []


def test_create_note_offline_generates_local_id(tmp_path: Path) -> None:
    """Offline notes get a local id and the default author."""

    client = _client(tmp_path, _offline)

    first = client.create_note("first offline")
    second = client.create_note("second offline", name="Grace")

    assert re.fullmatch(r"note-\d+-[a-z0-9]{9}", first.id)
    assert first.name == "Anonymous"
    assert second.name == "Grace"
    assert [note.id for note in client.store.load()] == [second.id, first.id]


def test_update_note_offline(tmp_path: Path) -> None:
    """Offline edits apply to the local copy, unknown ids raise."""

    client = _client(tmp_path, _offline)
    note = client.create_note("draft", name="Ada")

    updated = client.update_note(note.id, "final")

    assert updated.message == "final"
    assert updated.name == "Ada"
    assert client.store.load()[0].message == "final"
    with pytest.raises(WallClientError):
        client.update_note("missing", "anything")


def test_delete_note_offline_removes_local_copy(tmp_path: Path) -> None:
    """Offline removal drops the note from the local store."""

    client = _client(tmp_path, _offline)
    keep = client.create_note("keep")
    drop = client.create_note("drop")

    assert client.delete_note(drop.id) is True
    assert [note.id for note in client.store.load()] == [keep.id]


def test_authenticate_unlocks_admin_requests(tmp_path: Path) -> None:
    """A valid password sends the bearer token on admin calls."""

    seen_headers: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/admin/auth":
            password = json.loads(request.content)["password"]
            if password != "secret":
                return httpx.Response(401, json={"detail": "Incorrect password"})
            return httpx.Response(
                200,
                json={"success": True, "access_token": "token-123", "token_type": "bearer", "expires_in": 60},
            )
        seen_headers.append(request.headers.get("Authorization", ""))
        return httpx.Response(200, json={"message": "Note removed"})

    client = _client(tmp_path, handler)

    assert client.authenticate("wrong") is False
    assert not client.is_admin
    assert client.authenticate("secret") is True
    assert client.is_admin
    client.delete_note("remote-1")

    assert seen_headers == ["Bearer token-123"]


def test_authenticate_reports_unreachable_server(tmp_path: Path) -> None:
    """Connection failures raise with a readable message."""

    client = _client(tmp_path, _offline)

    with pytest.raises(WallClientError) as excinfo:
        client.authenticate("secret")

    assert str(excinfo.value) == "Cannot connect to server. Please check if the backend is running."


def test_corrupt_local_store_reads_as_empty(tmp_path: Path) -> None:
    """An unparseable store document loads as no notes."""

    path = tmp_path / "wall-notes.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalNoteStore(path).load() == []


def test_list_notes_falls_back_on_non_json_body(tmp_path: Path) -> None:
    """A 200 response that is not JSON reads the local copy instead of raising."""

    online = _client(tmp_path, lambda request: httpx.Response(200, json=[REMOTE_NOTE]))
    online.list_notes()

    proxied = _client(tmp_path, lambda request: httpx.Response(200, text="<html>proxy</html>"))

    assert [note.id for note in proxied.list_notes()] == ["remote-1"]


def test_list_notes_falls_back_on_unexpected_shape(tmp_path: Path) -> None:
    """JSON that does not describe notes also falls back to the local copy."""

    online = _client(tmp_path, lambda request: httpx.Response(200, json=[REMOTE_NOTE]))
    online.list_notes()

    wrong_shape = _client(tmp_path, lambda request: httpx.Response(200, json=[{"unexpected": True}]))

    assert [note.id for note in wrong_shape.list_notes()] == ["remote-1"]
    document = json.loads(wrong_shape.store.path.read_text(encoding="utf-8"))
    assert [item["id"] for item in document[STORAGE_KEY]] == ["remote-1"]


def test_create_note_falls_back_on_invalid_response(tmp_path: Path) -> None:
    """An unreadable create response still pins the note locally."""

    client = _client(tmp_path, lambda request: httpx.Response(201, json={"id": "partial"}))

    note = client.create_note("kept anyway", name="Ada")

    assert re.fullmatch(r"note-\d+-[a-z0-9]{9}", note.id)
    assert client.store.load()[0].message == "kept anyway"


def test_update_note_falls_back_on_non_json_body(tmp_path: Path) -> None:
    """An unreadable update response merges the edit into the local copy."""

    offline = _client(tmp_path, _offline)
    note = offline.create_note("draft")

    garbled = _client(tmp_path, lambda request: httpx.Response(200, text="not json"))
    updated = garbled.update_note(note.id, "final")

    assert updated.message == "final"
    assert garbled.store.load()[0].message == "final"
