"""Infinite-canvas navigation: viewport state, transforms, markers and transitions."""

from .animator import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler, ViewportAnimator
from .geometry import NoteDimensions, ScreenSize, Vector, to_screen, to_world
from .gestures import GestureOrigin, PanGestureHandler
from .layout import GridLayout, centroid, grid_position
from .radar import RadarEngine, RadarMarker
from .session import CanvasSession, CanvasSettings, CanvasSnapshot, derive_frame
from .store import AnimationState, ViewportStore
from .visibility import VisibilityClassifier

__all__ = [
    "AnimationState",
    "AsyncioFrameScheduler",
    "CanvasSession",
    "CanvasSettings",
    "CanvasSnapshot",
    "FrameScheduler",
    "GestureOrigin",
    "GridLayout",
    "ManualFrameScheduler",
    "NoteDimensions",
    "PanGestureHandler",
    "RadarEngine",
    "RadarMarker",
    "ScreenSize",
    "Vector",
    "ViewportAnimator",
    "ViewportStore",
    "VisibilityClassifier",
    "centroid",
    "derive_frame",
    "grid_position",
    "to_screen",
    "to_world",
]
