"""A canvas session wiring the viewport store to its readers and writers."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from wallboard.canvas.animator import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
    ViewportAnimator,
    monotonic_ms,
)
from wallboard.canvas.geometry import NoteDimensions, ScreenSize, Vector, centering_offset
from wallboard.canvas.gestures import GestureOrigin, PanGestureHandler
from wallboard.canvas.layout import GridLayout, centroid, grid_position
from wallboard.canvas.radar import DEFAULT_MIN_SPACING, DEFAULT_PADDING, RadarEngine, RadarMarker
from wallboard.canvas.store import ViewportStore
from wallboard.canvas.visibility import VisibilityClassifier
from wallboard.config import CanvasConfig
from wallboard.contracts import Note

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanvasSettings:
    """Geometry and timing constants for a session."""

    dimensions: NoteDimensions = field(default_factory=NoteDimensions)
    layout: GridLayout = field(default_factory=GridLayout)
    padding: float = DEFAULT_PADDING
    min_spacing: float = DEFAULT_MIN_SPACING
    duration_ms: float = 800.0
    frame_interval_ms: float = 16.0

    @classmethod
    def from_config(cls, config: CanvasConfig) -> "CanvasSettings":
        """Build session settings from the ``canvas`` config section."""

        grid = config.layout
        return cls(
            dimensions=NoteDimensions(width=config.note_width, height=config.note_height),
            layout=GridLayout(
                columns=grid.columns,
                cell_width=grid.cell_width,
                cell_height=grid.cell_height,
                jitter=grid.jitter,
                origin=Vector(grid.origin_x, grid.origin_y),
            ),
            padding=config.marker_padding,
            min_spacing=config.marker_min_spacing,
            duration_ms=config.animation_duration_ms,
            frame_interval_ms=config.frame_interval_ms,
        )


@dataclass(frozen=True)
class CanvasSnapshot:
    """Everything a renderer needs to paint one frame."""

    offset: Vector
    visibility: Dict[str, bool]
    markers: List[RadarMarker]
    animating: bool


def _snapshot(store: ViewportStore, note_ids: Sequence[str], radar: RadarEngine) -> CanvasSnapshot:
    classifier = VisibilityClassifier(store)
    return CanvasSnapshot(
        offset=store.offset,
        visibility={note_id: classifier.is_visible(note_id) for note_id in note_ids},
        markers=radar.compute_markers(note_ids),
        animating=store.is_animating,
    )


def derive_frame(
    note_ids: Sequence[str],
    screen: ScreenSize,
    offset: Vector,
    positions: Mapping[str, Vector],
    settings: Optional[CanvasSettings] = None,
) -> CanvasSnapshot:
    """Derive visibility and markers for a viewport described by the caller."""

    resolved = settings or CanvasSettings()
    store = ViewportStore(screen, resolved.dimensions, offset=offset)
    for note_id, position in positions.items():
        store.register_position(note_id, position)
    radar = RadarEngine(store, padding=resolved.padding, min_spacing=resolved.min_spacing)
    return _snapshot(store, note_ids, radar)


class CanvasSession:
    """Infinite-canvas state for one viewer.

    Owns the store and the components reading or writing it. The note list is
    supplied by the persistence collaborator through :meth:`sync_notes`.
    """

    def __init__(
        self,
        screen: ScreenSize,
        settings: Optional[CanvasSettings] = None,
        *,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._settings = settings or CanvasSettings()
        self.store = ViewportStore(screen, self._settings.dimensions)
        self.classifier = VisibilityClassifier(self.store)
        self.radar = RadarEngine(
            self.store,
            self.classifier,
            padding=self._settings.padding,
            min_spacing=self._settings.min_spacing,
        )
        self.scheduler = scheduler or ManualFrameScheduler()
        self.animator = ViewportAnimator(
            self.store,
            self.scheduler,
            duration_ms=self._settings.duration_ms,
            clock=clock,
        )
        self.gestures = PanGestureHandler(self.store)
        self._note_ids: List[str] = []

    @classmethod
    def on_event_loop(
        cls,
        screen: ScreenSize,
        settings: Optional[CanvasSettings] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> "CanvasSession":
        """Build a session whose animations advance on an asyncio event loop.

        Frames are spaced by ``settings.frame_interval_ms``. Timestamps come
        from the loop clock, which the animator also uses as its clock.
        """

        resolved = settings or CanvasSettings()
        scheduler = AsyncioFrameScheduler(resolved.frame_interval_ms, loop)
        return cls(
            screen,
            resolved,
            scheduler=scheduler,
            clock=scheduler.now_ms,
        )

    @property
    def settings(self) -> CanvasSettings:
        return self._settings

    @property
    def note_ids(self) -> List[str]:
        return list(self._note_ids)

    def sync_notes(
        self,
        notes: Sequence[Note],
        restored: Optional[Mapping[str, Vector]] = None,
    ) -> None:
        """Adopt a fresh note list from the persistence collaborator.

        New notes are placed once, either at a restored position or at their
        grid cell. A restored position for a note already on the canvas moves
        it there. Notes that disappeared lose their position. The first call
        that leaves any note positioned centers the viewport on them.
        """

        restored = restored or {}
        ordered: List[str] = []
        seen = set()
        for note in notes:
            if note.id in seen:
                continue
            seen.add(note.id)
            ordered.append(note.id)

        for stale_id in [note_id for note_id in self.store.positions if note_id not in seen]:
            self.store.forget_note(stale_id)

        for index, note_id in enumerate(ordered):
            position = restored.get(note_id)
            current = self.store.position_of(note_id)
            if current is not None:
                if position is not None and position != current:
                    self.store.move_note(note_id, position)
                continue
            if position is None:
                position = grid_position(index, note_id, self._settings.layout)
            self.store.register_position(note_id, position)

        self._note_ids = ordered
        self.center_on_notes()

    def center_on_notes(self) -> bool:
        """Center the viewport on the notes' centroid, once per session."""

        if self.store.has_centered:
            return False
        anchor = centroid(self.store.positions.values())
        if anchor is None:
            return False
        self.store.apply_offset(centering_offset(anchor, self.store.screen, self.store.dimensions))
        self.store.mark_centered()
        LOGGER.info(
            "Canvas centered on note centroid",
            extra={"notes": len(self.store.positions), "offset": (self.store.offset.x, self.store.offset.y)},
        )
        return True

    def move_note(self, note_id: str, position: Vector) -> None:
        """Record where a note was dropped after the user dragged it."""

        self.store.move_note(note_id, position)

    def pan(self, dx: float, dy: float, origin: GestureOrigin = GestureOrigin.BACKGROUND) -> bool:
        return self.gestures.on_drag(dx, dy, origin)

    def click_marker(self, note_id: str) -> Optional[Vector]:
        """Warp to a note; returns the target offset or ``None`` if it has no position."""

        target = self.radar.warp_target(note_id)
        if target is None:
            LOGGER.warning("Marker clicked for a note without a position", extra={"note_id": note_id})
            return None
        self.animator.animate_to(target)
        return target

    def resize(self, screen: ScreenSize) -> None:
        self.store.resize(screen)

    def snapshot(self) -> CanvasSnapshot:
        return _snapshot(self.store, self._note_ids, self.radar)


__all__ = ["CanvasSession", "CanvasSettings", "CanvasSnapshot", "derive_frame"]
