"""Initial placement of notes on the canvas."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from wallboard.canvas.geometry import ORIGIN, Vector


@dataclass(frozen=True)
class GridLayout:
    """Grid cells notes are dropped into, with per-note jitter."""

    columns: int = 4
    cell_width: float = 360.0
    cell_height: float = 280.0
    jitter: float = 40.0
    origin: Vector = ORIGIN

    def __post_init__(self) -> None:
        if self.columns < 1:
            raise ValueError("columns must be at least 1")


def id_seed(note_id: str) -> int:
    """Return the character-code sum used to seed per-note randomness."""

    return sum(ord(char) for char in note_id)


def seeded_unit(seed: int, salt: int = 0) -> float:
    """Return a deterministic pseudo-random value in ``[0, 1)``."""

    value = math.sin(seed + salt) * 10000.0
    return value - math.floor(value)


def grid_position(index: int, note_id: str, layout: Optional[GridLayout] = None) -> Vector:
    """Return the world anchor for the note at ``index`` in the note list.

    The cell comes from the index; the jitter inside ``[-jitter, +jitter]``
    comes from the note id so a note keeps its offset within any cell.
    """

    if index < 0:
        raise ValueError("index cannot be negative")
    grid = layout or GridLayout()
    row, column = divmod(index, grid.columns)
    seed = id_seed(note_id)
    jitter_x = (seeded_unit(seed, 0) - 0.5) * 2.0 * grid.jitter
    jitter_y = (seeded_unit(seed, 1) - 0.5) * 2.0 * grid.jitter
    return Vector(
        grid.origin.x + column * grid.cell_width + jitter_x,
        grid.origin.y + row * grid.cell_height + jitter_y,
    )


def centroid(points: Iterable[Vector]) -> Optional[Vector]:
    """Return the mean of ``points``, or ``None`` when there are none."""

    total_x = 0.0
    total_y = 0.0
    count = 0
    for point in points:
        total_x += point.x
        total_y += point.y
        count += 1
    if count == 0:
        return None
    return Vector(total_x / count, total_y / count)


__all__ = ["GridLayout", "centroid", "grid_position", "id_seed", "seeded_unit"]
