"""HTTP client for the notes API with a local file fallback.

When the service cannot be reached, reads and writes go to a JSON document
on disk holding the note array under :data:`STORAGE_KEY`, so the wall keeps
working offline with the same note shape.
"""
from __future__ import annotations

import json
import logging
import random
import string
import time
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from wallboard.config import REPO_ROOT, AppConfig
from wallboard.contracts import Note

LOGGER = logging.getLogger(__name__)

STORAGE_KEY = "wall-notes"
_ID_ALPHABET = string.ascii_lowercase + string.digits

# Failures that send a call to the local store instead of raising.
_FALLBACK_ERRORS = (httpx.HTTPError, ValueError, TypeError, ValidationError)


class WallClientError(RuntimeError):
    """Raised when the client cannot complete a request and has no fallback."""


def generate_local_id() -> str:
    """Return an identifier for a note created while offline."""

    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"note-{millis}-{suffix}"


class LocalNoteStore:
    """JSON file holding the last known note list."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Note]:
        """Return the stored notes; unreadable documents count as empty."""

        with self._lock:
            if not self._path.exists():
                return []
            try:
                document = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                LOGGER.warning("Local note store is unreadable; starting empty", extra={"path": str(self._path)})
                return []
            raw_notes = document.get(STORAGE_KEY, []) if isinstance(document, dict) else []
            notes: List[Note] = []
            for raw in raw_notes:
                try:
                    notes.append(Note.model_validate(raw))
                except ValidationError:
                    LOGGER.warning("Skipping malformed note in local store", extra={"path": str(self._path)})
            return notes

    def save(self, notes: List[Note]) -> None:
        """Rewrite the whole document."""

        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            document = {STORAGE_KEY: [note.to_payload() for note in notes]}
            self._path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    def prepend(self, note: Note) -> None:
        with self._lock:
            notes = [existing for existing in self.load() if existing.id != note.id]
            self.save([note, *notes])

    def replace(self, note: Note) -> bool:
        with self._lock:
            notes = self.load()
            for index, existing in enumerate(notes):
                if existing.id == note.id:
                    notes[index] = note
                    self.save(notes)
                    return True
            return False

    def merge(self, note_id: str, fields: Dict[str, Any]) -> Optional[Note]:
        """Apply ``fields`` to a stored note and return the result."""

        with self._lock:
            notes = self.load()
            for index, existing in enumerate(notes):
                if existing.id == note_id:
                    updated = existing.model_copy(update=fields)
                    notes[index] = updated
                    self.save(notes)
                    return updated
            return None

    def remove(self, note_id: str) -> bool:
        with self._lock:
            notes = self.load()
            remaining = [note for note in notes if note.id != note_id]
            if len(remaining) == len(notes):
                return False
            self.save(remaining)
            return True


class WallClient:
    """Persistence collaborator used by the canvas: remote first, local on failure."""

    def __init__(
        self,
        base_url: str,
        store: LocalNoteStore,
        *,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
        default_name: str = "Anonymous",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._store = store
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._default_name = default_name
        self._token: Optional[str] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "WallClient":
        """Build a client from the ``client`` config section."""

        fallback_path = Path(config.client.fallback_path)
        if not fallback_path.is_absolute():
            fallback_path = REPO_ROOT / fallback_path
        return cls(
            config.client.api_base_url,
            LocalNoteStore(fallback_path),
            timeout=config.client.timeout_seconds,
            default_name=config.notes.default_name,
        )

    @property
    def store(self) -> LocalNoteStore:
        return self._store

    @property
    def is_admin(self) -> bool:
        return self._token is not None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "WallClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _headers(self) -> Dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def list_notes(self) -> List[Note]:
        """Return notes newest first, from the server or the local store."""

        try:
            response = self._client.get(self._url("/notes"))
            response.raise_for_status()
            notes = [Note.model_validate(item) for item in response.json()]
        except _FALLBACK_ERRORS as exc:
            LOGGER.warning("API unavailable, falling back to local notes: %s", exc)
            return self._store.load()
        self._store.save(notes)
        return notes

    def create_note(self, message: str, name: Optional[str] = None) -> Note:
        """Pin a note remotely, or locally when the server is unreachable."""

        try:
            response = self._client.post(self._url("/notes"), json={"message": message, "name": name})
            response.raise_for_status()
            note = Note.model_validate(response.json())
        except _FALLBACK_ERRORS as exc:
            LOGGER.warning("API unavailable, creating note locally: %s", exc)
            note = Note(
                id=generate_local_id(),
                message=message,
                name=name or self._default_name,
                created_at=datetime.now(timezone.utc),
            )
        self._store.prepend(note)
        return note

    def update_note(self, note_id: str, message: str, name: Optional[str] = None) -> Note:
        """Edit a note remotely, or in the local store when the server fails.

        Raises:
            WallClientError: If the server fails and the note is not stored locally.
        """

        payload = {"message": message, "name": name}
        try:
            response = self._client.put(
                self._url(f"/notes/{note_id}"), json=payload, headers=self._headers()
            )
            response.raise_for_status()
            note = Note.model_validate(response.json())
        except _FALLBACK_ERRORS as exc:
            LOGGER.warning("API unavailable, updating note locally: %s", exc)
            fields: Dict[str, Any] = {"message": message}
            if name is not None:
                fields["name"] = name
            updated = self._store.merge(note_id, fields)
            if updated is None:
                raise WallClientError(f"Failed to update note {note_id}") from exc
            return updated
        if not self._store.replace(note):
            self._store.prepend(note)
        return note

    def delete_note(self, note_id: str) -> bool:
        """Remove a note; local removal stands in when the server fails."""

        try:
            response = self._client.delete(self._url(f"/notes/{note_id}"), headers=self._headers())
            response.raise_for_status()
        except _FALLBACK_ERRORS as exc:
            LOGGER.warning("API unavailable, removing note locally: %s", exc)
        self._store.remove(note_id)
        return True

    def authenticate(self, password: str) -> bool:
        """Check the admin password; a valid one unlocks edits and removals.

        Raises:
            WallClientError: If the server cannot be reached or answers unexpectedly.
        """

        try:
            response = self._client.post(self._url("/admin/auth"), json={"password": password})
        except httpx.TransportError as exc:
            LOGGER.error("Admin authentication request failed: %s", exc)
            raise WallClientError(
                "Cannot connect to server. Please check if the backend is running."
            ) from exc
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self._token = None
            return False
        if response.status_code != httpx.codes.OK:
            detail = _error_detail(response) or "Authentication failed"
            raise WallClientError(detail)
        data = response.json()
        token = data.get("access_token")
        self._token = token if isinstance(token, str) and token else None
        return bool(data.get("success")) and self._token is not None


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error")
        if isinstance(detail, str):
            return detail
    return None


__all__ = ["LocalNoteStore", "STORAGE_KEY", "WallClient", "WallClientError", "generate_local_id"]
