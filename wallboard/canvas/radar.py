"""Edge-of-screen markers pointing at off-screen notes."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from wallboard.canvas.geometry import (
    ScreenSize,
    Vector,
    centering_offset,
    clamp,
    note_screen_center,
)
from wallboard.canvas.store import ViewportStore
from wallboard.canvas.visibility import VisibilityClassifier

DEFAULT_PADDING = 50.0
DEFAULT_MIN_SPACING = 60.0


class ScreenEdge(str, Enum):
    """Screen edge a marker is pinned to."""

    RIGHT = "right"
    LEFT = "left"
    BOTTOM = "bottom"
    TOP = "top"


@dataclass(frozen=True)
class RadarMarker:
    """Marker geometry for one off-screen note."""

    note_id: str
    x: float
    y: float
    angle_degrees: float
    distance: float


def exit_edge(angle: float, aspect_ratio: float) -> ScreenEdge:
    """Return the edge a ray from the screen center at ``angle`` leaves through.

    Angles follow screen orientation: ``y`` grows downwards, so a positive
    angle points below the center.
    """

    threshold = math.atan(aspect_ratio)
    magnitude = abs(angle)
    if magnitude < threshold:
        return ScreenEdge.RIGHT
    if magnitude > math.pi - threshold:
        return ScreenEdge.LEFT
    if angle > 0:
        return ScreenEdge.BOTTOM
    return ScreenEdge.TOP


def clamp_to_screen(x: float, y: float, screen: ScreenSize, padding: float) -> Tuple[float, float]:
    """Keep a marker at least ``padding`` pixels away from every edge."""

    return (
        clamp(x, padding, screen.width - padding),
        clamp(y, padding, screen.height - padding),
    )


def edge_anchor(angle: float, screen: ScreenSize, padding: float) -> Tuple[float, float]:
    """Return the clamped marker position for a note lying in direction ``angle``."""

    center = screen.center
    edge = exit_edge(angle, screen.aspect_ratio)
    if edge is ScreenEdge.RIGHT or edge is ScreenEdge.LEFT:
        x = screen.width - padding if edge is ScreenEdge.RIGHT else padding
        y = center.y + (x - center.x) * math.tan(angle)
    else:
        y = screen.height - padding if edge is ScreenEdge.BOTTOM else padding
        x = center.x + (y - center.y) / math.tan(angle)
    return clamp_to_screen(x, y, screen, padding)


def _push_angles(
    x: float, y: float, existing: RadarMarker, screen: ScreenSize, padding: float
) -> List[float]:
    """Directions to try when moving a marker away from ``existing``, in order."""

    angles: List[float] = []
    if x != existing.x or y != existing.y:
        angles.append(math.atan2(y - existing.y, x - existing.x))
    center = screen.center
    if existing.x <= padding or existing.x >= screen.width - padding:
        along = math.pi / 2 if existing.y <= center.y else -math.pi / 2
        angles.extend((along, -along))
    if existing.y <= padding or existing.y >= screen.height - padding:
        along = 0.0 if existing.x <= center.x else math.pi
        angles.extend((along, math.pi - along))
    angles.append(math.atan2(center.y - existing.y, center.x - existing.x))
    return angles


def _push_clear(
    x: float,
    y: float,
    existing: RadarMarker,
    screen: ScreenSize,
    padding: float,
    min_spacing: float,
) -> Tuple[float, float]:
    candidates = [
        clamp_to_screen(
            existing.x + math.cos(angle) * min_spacing,
            existing.y + math.sin(angle) * min_spacing,
            screen,
            padding,
        )
        for angle in _push_angles(x, y, existing, screen, padding)
    ]
    for cx, cy in candidates:
        if math.hypot(cx - existing.x, cy - existing.y) >= min_spacing - 1e-9:
            return cx, cy
    return candidates[0]


def separate_markers(
    markers: Sequence[RadarMarker],
    screen: ScreenSize,
    *,
    padding: float = DEFAULT_PADDING,
    min_spacing: float = DEFAULT_MIN_SPACING,
) -> List[RadarMarker]:
    """Push markers apart that sit closer than ``min_spacing``.

    Markers are placed greedily in input order. Each one is compared with
    every marker placed before it; on a conflict it is moved to exactly
    ``min_spacing`` from that neighbour along the line joining them. When
    that direction is undefined (identical positions) or the padding clamp
    would pull the marker back, it slides along the neighbour's screen edge
    instead, then towards the screen center. A displaced marker is not
    re-checked against neighbours it already passed, so tight clusters of
    three or more may still overlap.
    """

    placed: List[RadarMarker] = []
    for marker in markers:
        x, y = marker.x, marker.y
        for existing in placed:
            if math.hypot(x - existing.x, y - existing.y) >= min_spacing:
                continue
            x, y = _push_clear(x, y, existing, screen, padding, min_spacing)
        placed.append(replace(marker, x=x, y=y))
    return placed


class RadarEngine:
    """Compute radar markers and warp targets from the viewport store."""

    def __init__(
        self,
        store: ViewportStore,
        classifier: Optional[VisibilityClassifier] = None,
        *,
        padding: float = DEFAULT_PADDING,
        min_spacing: float = DEFAULT_MIN_SPACING,
    ) -> None:
        self._store = store
        self._classifier = classifier or VisibilityClassifier(store)
        self._padding = padding
        self._min_spacing = min_spacing

    def raw_marker(self, note_id: str) -> Optional[RadarMarker]:
        """Return the unspaced marker for a note, ``None`` without a position."""

        anchor = self._store.position_of(note_id)
        if anchor is None:
            return None
        screen = self._store.screen
        note_center = note_screen_center(anchor, self._store.offset, self._store.dimensions)
        dx = note_center.x - screen.center.x
        dy = note_center.y - screen.center.y
        angle = math.atan2(dy, dx)
        x, y = edge_anchor(angle, screen, self._padding)
        return RadarMarker(
            note_id=note_id,
            x=x,
            y=y,
            angle_degrees=math.degrees(angle),
            distance=math.hypot(dx, dy),
        )

    def compute_markers(self, note_ids: Iterable[str]) -> List[RadarMarker]:
        """Return spaced markers for every off-screen note in ``note_ids`` order."""

        raw: List[RadarMarker] = []
        for note_id in note_ids:
            if self._classifier.is_visible(note_id):
                continue
            marker = self.raw_marker(note_id)
            if marker is not None:
                raw.append(marker)
        return separate_markers(
            raw,
            self._store.screen,
            padding=self._padding,
            min_spacing=self._min_spacing,
        )

    def warp_target(self, note_id: str) -> Optional[Vector]:
        """Return the offset that centers ``note_id`` on screen."""

        anchor = self._store.position_of(note_id)
        if anchor is None:
            return None
        return centering_offset(anchor, self._store.screen, self._store.dimensions)


__all__ = [
    "DEFAULT_MIN_SPACING",
    "DEFAULT_PADDING",
    "RadarEngine",
    "RadarMarker",
    "ScreenEdge",
    "clamp_to_screen",
    "edge_anchor",
    "exit_edge",
    "separate_markers",
]
