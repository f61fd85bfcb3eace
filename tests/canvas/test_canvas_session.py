"""Tests for a canvas session: note sync, centering, warps and frames."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from wallboard.canvas.animator import AsyncioFrameScheduler, ManualFrameScheduler
from wallboard.canvas.geometry import ScreenSize, Vector
from wallboard.canvas.gestures import GestureOrigin
from wallboard.canvas.session import CanvasSession, CanvasSettings, derive_frame
from wallboard.config import load_config
from wallboard.contracts import Note

SCREEN = ScreenSize(1024, 768)


def _note(note_id: str, message: str = "hello") -> Note:
    return Note(
        id=note_id,
        message=message,
        name="Tester",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _session() -> CanvasSession:
    return CanvasSession(SCREEN, scheduler=ManualFrameScheduler(), clock=lambda: 0.0)


def test_first_sync_centers_on_the_centroid_once() -> None:
    """The first populated sync centers the viewport and later syncs leave it alone."""

    session = _session()

    session.sync_notes(
        [_note("a"), _note("b")],
        restored={"a": Vector(0.0, 0.0), "b": Vector(5000.0, 0.0)},
    )

    assert session.store.has_centered
    assert session.store.offset == Vector(512.0 - 2500.0 - 140.0, 384.0 - 100.0)

    session.pan(100.0, 0.0)
    session.sync_notes([_note("a"), _note("b"), _note("c")])

    assert session.store.offset == Vector(512.0 - 2500.0 - 140.0 + 100.0, 284.0)
    assert session.center_on_notes() is False


def test_empty_wall_does_not_center_until_notes_arrive() -> None:
    """An empty wall keeps the origin offset until a note is placed."""

    session = _session()

    session.sync_notes([])
    assert not session.store.has_centered
    assert session.store.offset == Vector()

    session.sync_notes([_note("a")], restored={"a": Vector(100.0, 100.0)})
    assert session.store.has_centered
    assert session.store.offset == Vector(272.0, 184.0)


def test_sync_keeps_existing_positions_and_drops_removed_notes() -> None:
    """Resyncing keeps placed notes where they are, dedupes ids and drops missing notes."""

    session = _session()
    session.sync_notes([_note("a"), _note("b")])
    placed_b = session.store.position_of("b")
    session.move_note("a", Vector(-50.0, -50.0))

    session.sync_notes([_note("new"), _note("a"), _note("a"), _note("b")])

    assert session.note_ids == ["new", "a", "b"]
    assert session.store.position_of("a") == Vector(-50.0, -50.0)
    assert session.store.position_of("b") == placed_b

    session.sync_notes([_note("new")])
    assert session.store.position_of("a") is None
    assert set(session.store.positions) == {"new"}


def test_click_marker_warps_until_note_is_visible() -> None:
    """Clicking a marker animates the offset until the note is on screen."""

    session = _session()
    session.sync_notes(
        [_note("a"), _note("b")],
        restored={"a": Vector(0.0, 0.0), "b": Vector(5000.0, 0.0)},
    )
    before = session.snapshot()
    assert before.visibility == {"a": False, "b": False}
    assert {marker.note_id for marker in before.markers} == {"a", "b"}

    target = session.click_marker("b")

    assert target == Vector(-4628.0, 284.0)
    assert session.snapshot().animating
    assert session.pan(10.0, 10.0) is False

    assert isinstance(session.scheduler, ManualFrameScheduler)
    session.scheduler.run_frame(800.0)

    after = session.snapshot()
    assert after.offset == target
    assert after.visibility == {"a": False, "b": True}
    assert [marker.note_id for marker in after.markers] == ["a"]
    assert not after.animating


def test_click_marker_for_unknown_note_is_a_no_op() -> None:
    """A marker click for an unplaced note starts no animation."""

    session = _session()

    assert session.click_marker("ghost") is None
    assert not session.store.is_animating


def test_dragging_a_note_does_not_pan() -> None:
    """Drags that start on a note leave the viewport offset unchanged."""

    session = _session()

    assert session.pan(5.0, 5.0, GestureOrigin.NOTE) is False
    assert session.store.offset == Vector()


def test_derive_frame_is_stateless() -> None:
    """A frame derived from caller-supplied state reports visibility and markers."""

    frame = derive_frame(
        ["far", "near", "unplaced"],
        SCREEN,
        Vector(),
        {"far": Vector(5200.0, 5100.0), "near": Vector(10.0, 10.0)},
    )

    assert frame.offset == Vector()
    assert frame.visibility == {"far": False, "near": True, "unplaced": True}
    assert [marker.note_id for marker in frame.markers] == ["far"]
    assert frame.markers[0].x == pytest.approx(974.0)
    assert not frame.animating


def test_settings_from_config() -> None:
    """Session settings mirror the canvas section of config.yaml."""

    settings = CanvasSettings.from_config(load_config().canvas)

    assert settings.dimensions.width == 280.0
    assert settings.dimensions.height == 200.0
    assert settings.padding == 50.0
    assert settings.min_spacing == 60.0
    assert settings.duration_ms == 800.0
    assert settings.layout.columns == 4
    assert settings.frame_interval_ms == 16.0


def test_marker_click_scenario_reaches_target() -> None:
    """A note panned off screen is brought back by its marker."""

    session = _session()
    session.sync_notes([_note("solo")], restored={"solo": Vector(100.0, 100.0)})
    session.pan(3000.0, 0.0)
    assert session.snapshot().visibility == {"solo": False}

    target = session.click_marker("solo")
    session.scheduler.run_frame(400.0)  # type: ignore[attr-defined]
    assert session.store.offset != target
    session.scheduler.run_frame(800.0)  # type: ignore[attr-defined]

    assert target == Vector(272.0, 184.0)
    assert session.store.offset == target
    assert session.snapshot().visibility == {"solo": True}


def test_restored_position_moves_a_note_already_on_the_canvas() -> None:
    """A restored position wins over the one a known note already holds."""

    session = _session()
    session.sync_notes([_note("a"), _note("b")])
    placed_b = session.store.position_of("b")

    session.sync_notes([_note("a"), _note("b")], restored={"a": Vector(7.0, 7.0)})

    assert session.store.position_of("a") == Vector(7.0, 7.0)
    assert session.store.position_of("b") == placed_b


def test_event_loop_session_uses_configured_frame_interval() -> None:
    """Warps on an asyncio loop are paced by the settings' frame interval."""

    async def _run() -> None:
        session = CanvasSession.on_event_loop(
            SCREEN, CanvasSettings(duration_ms=30.0, frame_interval_ms=1.0)
        )
        assert isinstance(session.scheduler, AsyncioFrameScheduler)
        assert session.scheduler.frame_interval_ms == 1.0

        session.sync_notes([_note("solo")], restored={"solo": Vector(100.0, 100.0)})
        session.pan(3000.0, 0.0)
        target = session.click_marker("solo")
        for _ in range(100):
            if not session.animator.is_animating:
                break
            await asyncio.sleep(0.01)

        assert target == Vector(272.0, 184.0)
        assert session.store.offset == target
        assert session.snapshot().visibility == {"solo": True}

    asyncio.run(_run())
