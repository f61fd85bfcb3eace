"""Note persistence and validation."""

from .repository import NoteRepository
from .service import NoteService, NoteServiceError

__all__ = ["NoteRepository", "NoteService", "NoteServiceError"]
