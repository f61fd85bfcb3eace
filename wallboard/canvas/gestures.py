"""Background drag handling for the canvas."""
from __future__ import annotations

from enum import Enum

from wallboard.canvas.geometry import Vector
from wallboard.canvas.store import ViewportStore


class GestureOrigin(str, Enum):
    """Element a drag gesture started on."""

    BACKGROUND = "background"
    NOTE = "note"


class PanGestureHandler:
    """Translate drag deltas into 1:1 viewport movement."""

    def __init__(self, store: ViewportStore) -> None:
        self._store = store

    def on_drag(self, dx: float, dy: float, origin: GestureOrigin = GestureOrigin.BACKGROUND) -> bool:
        """Apply a drag delta and return whether the viewport moved.

        Deltas are dropped while an animation owns the offset and when the
        drag began on a note, which moves itself instead.
        """

        if self._store.is_animating:
            return False
        if origin is GestureOrigin.NOTE:
            return False
        self._store.pan_by(Vector(dx, dy))
        return True


__all__ = ["GestureOrigin", "PanGestureHandler"]
