"""Tests for initial note placement and marker tooltip text."""
from __future__ import annotations

import pytest

from wallboard.canvas.geometry import Vector
from wallboard.canvas.layout import GridLayout, centroid, grid_position, id_seed, seeded_unit
from wallboard.canvas.preview import author_label, format_distance, truncate_message


def test_grid_position_is_deterministic_per_note() -> None:
    """The same index and id always give the same position."""

    first = grid_position(3, "note-abc")
    second = grid_position(3, "note-abc")

    assert first == second


def test_grid_position_uses_cell_and_bounded_jitter() -> None:
    """Jitter stays within the configured radius of the cell origin."""

    layout = GridLayout(columns=4, cell_width=360.0, cell_height=280.0, jitter=40.0)

    position = grid_position(5, "note-xyz", layout)

    assert 320.0 <= position.x <= 400.0
    assert 240.0 <= position.y <= 320.0


def test_grid_position_without_jitter_is_exact() -> None:
    """Without jitter a note sits exactly on its cell origin."""

    layout = GridLayout(columns=3, jitter=0.0, origin=Vector(10.0, 20.0))

    assert grid_position(4, "any", layout) == Vector(10.0 + 360.0, 20.0 + 280.0)


def test_grid_layout_validation() -> None:
    """Invalid column counts and negative indices raise."""

    with pytest.raises(ValueError):
        GridLayout(columns=0)
    with pytest.raises(ValueError):
        grid_position(-1, "note")


def test_seeded_unit_range() -> None:
    """The id seed sums character codes and yields values in [0, 1)."""

    seed = id_seed("abc")

    assert seed == ord("a") + ord("b") + ord("c")
    for salt in range(10):
        assert 0.0 <= seeded_unit(seed, salt) < 1.0


def test_centroid() -> None:
    """Centroid of no points is None, otherwise the mean position."""

    assert centroid([]) is None
    assert centroid([Vector(0.0, 0.0), Vector(10.0, 20.0)]) == Vector(5.0, 10.0)


def test_truncate_message() -> None:
    """Long messages are cut at max_length and end with an ellipsis."""

    assert truncate_message("short") == "short"
    assert truncate_message("a" * 70) == "a" * 60 + "..."
    assert truncate_message("word " * 20, max_length=10) == "word word..."
    assert truncate_message(None) == ""


def test_format_distance() -> None:
    """Distances under 500px print as pixels, larger ones in thousands."""

    assert format_distance(320.4) == "320px"
    assert format_distance(4800.0) == "4.8k px"
    assert format_distance(6819.3) == "6.8k px"


def test_author_label_defaults_when_blank() -> None:
    """Blank or missing authors fall back to the default name."""

    assert author_label("  Ada ") == "Ada"
    assert author_label("   ") == "Anonymous"
    assert author_label(None, default="Someone") == "Someone"
