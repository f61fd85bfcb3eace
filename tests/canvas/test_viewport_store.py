"""Tests for the viewport store and note visibility."""
from __future__ import annotations

from typing import List

import pytest

from wallboard.canvas.geometry import ScreenSize, Vector
from wallboard.canvas.store import AnimationState, StoreChange, ViewportStore
from wallboard.canvas.visibility import VisibilityClassifier


def _store() -> ViewportStore:
    return ViewportStore(ScreenSize(1024, 768))


def test_register_position_keeps_the_first_position() -> None:
    """Registration is first-wins, moving a note overwrites."""

    store = _store()

    assert store.register_position("a", Vector(10.0, 20.0)) is True
    assert store.register_position("a", Vector(99.0, 99.0)) is False
    assert store.position_of("a") == Vector(10.0, 20.0)

    store.move_note("a", Vector(99.0, 99.0))
    assert store.position_of("a") == Vector(99.0, 99.0)


def test_positions_view_is_read_only() -> None:
    """The positions mapping cannot be written through."""

    store = _store()
    store.register_position("a", Vector())

    with pytest.raises(TypeError):
        store.positions["b"] = Vector()  # type: ignore[index]


def test_listeners_hear_every_write_until_unsubscribed() -> None:
    """Every store write notifies listeners until they unsubscribe."""

    store = _store()
    changes: List[StoreChange] = []
    unsubscribe = store.subscribe(changes.append)

    store.register_position("a", Vector())
    store.pan_by(Vector(5.0, 5.0))
    store.begin_animation(AnimationState(Vector(), Vector(1.0, 1.0), 0.0))
    store.end_animation()
    store.resize(ScreenSize(800, 600))
    unsubscribe()
    store.pan_by(Vector(1.0, 1.0))

    assert changes == [
        StoreChange.POSITION,
        StoreChange.OFFSET,
        StoreChange.ANIMATION,
        StoreChange.ANIMATION,
        StoreChange.SCREEN,
    ]
    assert store.offset == Vector(6.0, 6.0)


def test_forget_note_reports_whether_anything_was_removed() -> None:
    """Forgetting a note reports whether it had a position."""

    store = _store()
    store.register_position("a", Vector())

    assert store.forget_note("a") is True
    assert store.forget_note("a") is False
    assert store.position_of("a") is None


def test_visibility_at_screen_boundaries() -> None:
    """Notes touching the right or left edge from outside are off screen."""

    store = _store()
    store.register_position("origin", Vector(0.0, 0.0))
    store.register_position("right-edge", Vector(1024.0, 0.0))
    store.register_position("just-inside", Vector(1023.0, 0.0))
    store.register_position("left-edge", Vector(-280.0, 0.0))
    store.register_position("left-overlap", Vector(-279.0, 0.0))
    classifier = VisibilityClassifier(store)

    assert classifier.is_visible("origin")
    assert not classifier.is_visible("right-edge")
    assert classifier.is_visible("just-inside")
    assert not classifier.is_visible("left-edge")
    assert classifier.is_visible("left-overlap")


def test_note_without_position_counts_as_visible() -> None:
    """Unplaced notes count as visible so they get no marker."""

    classifier = VisibilityClassifier(_store())

    assert classifier.bounding_box("ghost") is None
    assert classifier.is_visible("ghost")


def test_visibility_follows_pan_and_resize() -> None:
    """Visibility is recomputed from the current offset and screen."""

    store = _store()
    store.register_position("far", Vector(2000.0, 100.0))
    classifier = VisibilityClassifier(store)

    assert not classifier.is_visible("far")
    store.pan_by(Vector(-1500.0, 0.0))
    assert classifier.is_visible("far")
    store.resize(ScreenSize(400, 300))
    assert not classifier.is_visible("far")


def test_note_centered_on_screen_is_visible() -> None:
    """A note at its centering offset is visible."""

    store = ViewportStore(ScreenSize(1024, 768), offset=Vector(272.0, 84.0))
    store.register_position("centered", Vector(100.0, 200.0))

    assert VisibilityClassifier(store).is_visible("centered")
