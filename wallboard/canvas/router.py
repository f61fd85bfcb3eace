"""FastAPI router serving canvas layouts and radar frames."""
from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter, Depends, Request

from wallboard.canvas.geometry import centering_offset
from wallboard.canvas.preview import author_label, format_distance, truncate_message
from wallboard.canvas.schemas import (
    FrameRequest,
    FrameResponse,
    LayoutRequest,
    LayoutResponse,
    MarkerPayload,
    PointPayload,
)
from wallboard.canvas.session import CanvasSession, CanvasSettings, derive_frame
from wallboard.config import AppConfig
from wallboard.contracts import Note
from wallboard.notes.router import get_note_service
from wallboard.notes.service import NoteService

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/canvas", tags=["canvas"])


def get_canvas_settings(request: Request) -> CanvasSettings:
    """Return canvas settings derived from the application config."""

    config: AppConfig = request.app.state.app_config
    return CanvasSettings.from_config(config.canvas)


def get_preview_length(request: Request) -> int:
    return request.app.state.app_config.canvas.preview_length


def get_default_author(request: Request) -> str:
    return request.app.state.app_config.notes.default_name


@router.post("/layout", response_model=LayoutResponse, summary="Place notes on the canvas")
async def canvas_layout(
    payload: LayoutRequest,
    service: NoteService = Depends(get_note_service),
    settings: CanvasSettings = Depends(get_canvas_settings),
) -> LayoutResponse:
    """Return grid positions for stored notes and the offset that centers them."""

    notes = await service.list_notes()
    session = CanvasSession(payload.screen.to_screen(), settings)
    session.sync_notes(
        notes,
        restored={note_id: point.to_vector() for note_id, point in payload.positions.items()},
    )
    positions = {
        note_id: PointPayload.from_vector(position)
        for note_id, position in session.store.positions.items()
    }
    return LayoutResponse(
        positions=positions,
        offset=PointPayload.from_vector(session.store.offset),
        centered=session.store.has_centered,
    )


@router.post("/frame", response_model=FrameResponse, summary="Derive visibility and radar markers")
async def canvas_frame(
    payload: FrameRequest,
    service: NoteService = Depends(get_note_service),
    settings: CanvasSettings = Depends(get_canvas_settings),
    preview_length: int = Depends(get_preview_length),
    default_author: str = Depends(get_default_author),
) -> FrameResponse:
    """Classify stored notes against the viewport and place markers for hidden ones."""

    notes = await service.list_notes()
    by_id: Dict[str, Note] = {note.id: note for note in notes}
    screen = payload.screen.to_screen()
    positions = {note_id: point.to_vector() for note_id, point in payload.positions.items()}
    frame = derive_frame(
        [note.id for note in notes],
        screen,
        payload.offset.to_vector(),
        positions,
        settings,
    )
    markers = []
    for marker in frame.markers:
        note = by_id[marker.note_id]
        target = centering_offset(positions[marker.note_id], screen, settings.dimensions)
        markers.append(
            MarkerPayload(
                note_id=marker.note_id,
                x=marker.x,
                y=marker.y,
                angle_degrees=marker.angle_degrees,
                distance=marker.distance,
                distance_label=format_distance(marker.distance),
                author=author_label(note.name, default_author),
                preview=truncate_message(note.message, preview_length),
                warp_target=PointPayload.from_vector(target),
            )
        )
    LOGGER.debug(
        "Canvas frame derived",
        extra={"notes": len(notes), "markers": len(markers)},
    )
    return FrameResponse(
        offset=PointPayload.from_vector(frame.offset),
        visibility=frame.visibility,
        markers=markers,
    )


__all__ = ["router"]
