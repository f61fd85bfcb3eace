"""On-screen classification of canvas notes."""
from __future__ import annotations

from typing import Optional

from wallboard.canvas.geometry import ScreenRect, note_screen_rect
from wallboard.canvas.store import ViewportStore


class VisibilityClassifier:
    """Decide whether a note's bounding box overlaps the viewport."""

    def __init__(self, store: ViewportStore) -> None:
        self._store = store

    def bounding_box(self, note_id: str) -> Optional[ScreenRect]:
        """Return the note's screen-space box, or ``None`` without a position."""

        anchor = self._store.position_of(note_id)
        if anchor is None:
            return None
        return note_screen_rect(anchor, self._store.offset, self._store.dimensions)

    def is_visible(self, note_id: str) -> bool:
        """Return whether the note is on screen.

        Notes without a recorded position are reported visible so they can
        never end up hidden behind a marker that has nowhere to point.
        """

        box = self.bounding_box(note_id)
        if box is None:
            return True
        return box.intersects(self._store.screen)


__all__ = ["VisibilityClassifier"]
