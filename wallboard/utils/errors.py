"""Translation of service error reasons into HTTP responses."""
from __future__ import annotations

from fastapi import status


def status_from_reason(reason: str) -> int:
    """Translate service error reasons into HTTP status codes."""

    mapping = {
        "bad_request": status.HTTP_400_BAD_REQUEST,
        "unauthorized": status.HTTP_401_UNAUTHORIZED,
        "forbidden": status.HTTP_403_FORBIDDEN,
        "not_found": status.HTTP_404_NOT_FOUND,
        "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    return mapping.get(reason, status.HTTP_400_BAD_REQUEST)


__all__ = ["status_from_reason"]
