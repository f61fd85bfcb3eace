"""Pydantic payloads for the canvas endpoints."""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from wallboard.canvas.geometry import ScreenSize, Vector


class _FrozenModel(BaseModel):
    """Base immutable schema."""

    model_config = ConfigDict(frozen=True)


class PointPayload(_FrozenModel):
    """A point in world or screen space."""

    x: float
    y: float

    @classmethod
    def from_vector(cls, vector: Vector) -> "PointPayload":
        return cls(x=vector.x, y=vector.y)

    def to_vector(self) -> Vector:
        return Vector(self.x, self.y)


class ScreenPayload(_FrozenModel):
    """Viewport size in pixels."""

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    def to_screen(self) -> ScreenSize:
        return ScreenSize(self.width, self.height)


class LayoutRequest(_FrozenModel):
    """Viewport size plus positions restored from earlier drags."""

    screen: ScreenPayload
    positions: Dict[str, PointPayload] = Field(default_factory=dict)


class LayoutResponse(_FrozenModel):
    """World positions for every stored note and the centering offset."""

    positions: Dict[str, PointPayload]
    offset: PointPayload
    centered: bool


class FrameRequest(_FrozenModel):
    """Viewport state to derive visibility and markers for."""

    screen: ScreenPayload
    offset: PointPayload = Field(default_factory=lambda: PointPayload(x=0.0, y=0.0))
    positions: Dict[str, PointPayload] = Field(default_factory=dict)


class MarkerPayload(_FrozenModel):
    """Radar marker with its tooltip text and warp target."""

    note_id: str
    x: float
    y: float
    angle_degrees: float
    distance: float
    distance_label: str
    author: str
    preview: str
    warp_target: PointPayload


class FrameResponse(_FrozenModel):
    """Derived frame for the renderer."""

    offset: PointPayload
    visibility: Dict[str, bool]
    markers: List[MarkerPayload]


__all__ = [
    "FrameRequest",
    "FrameResponse",
    "LayoutRequest",
    "LayoutResponse",
    "MarkerPayload",
    "PointPayload",
    "ScreenPayload",
]
