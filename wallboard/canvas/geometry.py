"""World/screen coordinate helpers for the infinite canvas."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector:
    """A point or displacement in the plane."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def scaled(self, factor: float) -> "Vector":
        """Return the vector multiplied by ``factor``."""

        return Vector(self.x * factor, self.y * factor)

    def distance_to(self, other: "Vector") -> float:
        """Return the Euclidean distance to ``other``."""

        return math.hypot(self.x - other.x, self.y - other.y)


ORIGIN = Vector()


@dataclass(frozen=True)
class ScreenSize:
    """Pixel dimensions of the visible viewport."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("screen dimensions must be positive")

    @property
    def center(self) -> Vector:
        return Vector(self.width / 2.0, self.height / 2.0)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class NoteDimensions:
    """Rendered size of a note card; its anchor is the top-left corner."""

    width: float = 280.0
    height: float = 200.0

    @property
    def center_offset(self) -> Vector:
        """Offset from a note's anchor to its visual center."""

        return Vector(self.width / 2.0, self.height / 2.0)


@dataclass(frozen=True)
class ScreenRect:
    """Axis-aligned rectangle in screen space, right/bottom exclusive."""

    left: float
    top: float
    right: float
    bottom: float

    def intersects(self, screen: ScreenSize) -> bool:
        """Return whether the rectangle overlaps ``[0, width) x [0, height)``."""

        return (
            self.left < screen.width
            and self.right > 0
            and self.top < screen.height
            and self.bottom > 0
        )


def to_screen(world: Vector, offset: Vector) -> Vector:
    """Convert a world-space point to screen space."""

    return world + offset


def to_world(screen: Vector, offset: Vector) -> Vector:
    """Convert a screen-space point to world space."""

    return screen - offset


def note_screen_rect(anchor: Vector, offset: Vector, dimensions: NoteDimensions) -> ScreenRect:
    """Return the on-screen bounding box of a note anchored at ``anchor``."""

    top_left = to_screen(anchor, offset)
    return ScreenRect(
        left=top_left.x,
        top=top_left.y,
        right=top_left.x + dimensions.width,
        bottom=top_left.y + dimensions.height,
    )


def note_screen_center(anchor: Vector, offset: Vector, dimensions: NoteDimensions) -> Vector:
    """Return the screen-space visual center of a note."""

    return to_screen(anchor, offset) + dimensions.center_offset


def centering_offset(anchor: Vector, screen: ScreenSize, dimensions: NoteDimensions) -> Vector:
    """Return the viewport offset that puts the center of ``anchor`` on screen center."""

    return screen.center - anchor - dimensions.center_offset


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""

    return max(lower, min(upper, value))


__all__ = [
    "ORIGIN",
    "NoteDimensions",
    "ScreenRect",
    "ScreenSize",
    "Vector",
    "centering_offset",
    "clamp",
    "note_screen_center",
    "note_screen_rect",
    "to_screen",
    "to_world",
]
