"""Text shown next to radar markers."""
from __future__ import annotations

from typing import Optional


def truncate_message(message: Optional[str], max_length: int = 60) -> str:
    if not message:
        return ""
    if len(message) <= max_length:
        return message
    return message[:max_length].strip() + "..."


def format_distance(pixels: float) -> str:
    """Return a short label for a distance in pixels, e.g. ``"320px"`` or ``"4.8k px"``."""

    if pixels < 500:
        return f"{round(pixels)}px"
    return f"{pixels / 1000:.1f}k px"


def author_label(name: Optional[str], default: str = "Anonymous") -> str:
    cleaned = (name or "").strip()
    return cleaned or default


__all__ = ["author_label", "format_distance", "truncate_message"]
