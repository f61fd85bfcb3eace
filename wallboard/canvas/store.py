"""Viewport state shared by every canvas component."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from wallboard.canvas.geometry import ORIGIN, NoteDimensions, ScreenSize, Vector

LOGGER = logging.getLogger(__name__)


class StoreChange(str, Enum):
    """Kinds of writes announced to store listeners."""

    OFFSET = "offset"
    POSITION = "position"
    ANIMATION = "animation"
    SCREEN = "screen"


@dataclass(frozen=True)
class AnimationState:
    """An in-flight programmatic pan from ``start`` to ``target``."""

    start: Vector
    target: Vector
    start_time: float


StoreListener = Callable[[StoreChange], None]


class ViewportStore:
    """Single owner of the pan offset, note positions and animation status.

    The offset is written only through :meth:`pan_by` (gestures) and
    :meth:`apply_offset` (animator and initial centering). Note positions are
    written through :meth:`register_position` and :meth:`move_note`.
    """

    def __init__(
        self,
        screen: ScreenSize,
        dimensions: Optional[NoteDimensions] = None,
        *,
        offset: Vector = ORIGIN,
    ) -> None:
        self._screen = screen
        self._dimensions = dimensions or NoteDimensions()
        self._offset = offset
        self._positions: Dict[str, Vector] = {}
        self._animation: Optional[AnimationState] = None
        self._has_centered = False
        self._listeners: List[StoreListener] = []

    @property
    def screen(self) -> ScreenSize:
        return self._screen

    @property
    def dimensions(self) -> NoteDimensions:
        return self._dimensions

    @property
    def offset(self) -> Vector:
        return self._offset

    @property
    def positions(self) -> Mapping[str, Vector]:
        """Read-only view of the note position map."""

        return MappingProxyType(self._positions)

    @property
    def animation(self) -> Optional[AnimationState]:
        return self._animation

    @property
    def is_animating(self) -> bool:
        return self._animation is not None

    @property
    def has_centered(self) -> bool:
        return self._has_centered

    def position_of(self, note_id: str) -> Optional[Vector]:
        """Return the world position of a note, or ``None`` when unknown."""

        return self._positions.get(note_id)

    def register_position(self, note_id: str, position: Vector) -> bool:
        """Record the initial position of a note.

        Returns:
            bool: ``True`` when the position was stored, ``False`` when the
                note was already placed and the call was ignored.
        """

        if note_id in self._positions:
            return False
        self._positions[note_id] = position
        self._notify(StoreChange.POSITION)
        return True

    def move_note(self, note_id: str, position: Vector) -> None:
        """Store the position a note was dragged to."""

        self._positions[note_id] = position
        self._notify(StoreChange.POSITION)

    def forget_note(self, note_id: str) -> bool:
        """Drop the position of a note that left the note list."""

        if self._positions.pop(note_id, None) is None:
            return False
        self._notify(StoreChange.POSITION)
        return True

    def pan_by(self, delta: Vector) -> None:
        """Translate the viewport immediately by ``delta``."""

        self._offset = self._offset + delta
        self._notify(StoreChange.OFFSET)

    def apply_offset(self, offset: Vector) -> None:
        """Replace the viewport offset."""

        self._offset = offset
        self._notify(StoreChange.OFFSET)

    def begin_animation(self, state: AnimationState) -> None:
        self._animation = state
        self._notify(StoreChange.ANIMATION)

    def end_animation(self) -> None:
        if self._animation is None:
            return
        self._animation = None
        self._notify(StoreChange.ANIMATION)

    def mark_centered(self) -> None:
        self._has_centered = True

    def resize(self, screen: ScreenSize) -> None:
        """Update the viewport dimensions after a window resize."""

        self._screen = screen
        self._notify(StoreChange.SCREEN)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)


__all__ = ["AnimationState", "StoreChange", "StoreListener", "ViewportStore"]
