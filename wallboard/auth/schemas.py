"""Pydantic schemas for the admin gate APIs."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    """Base immutable schema."""

    model_config = ConfigDict(frozen=True)


class AdminAuthRequest(_FrozenModel):
    """Password submitted to unlock the admin panel."""

    password: str = Field(..., min_length=1, max_length=72)


class AdminAuthResponse(_FrozenModel):
    """Response payload returned after a successful admin login."""

    success: bool = True
    access_token: str = Field(..., min_length=1)
    token_type: str = Field("bearer", min_length=1)
    expires_in: int = Field(..., ge=1)


class AdminSession(_FrozenModel):
    """Decoded admin session."""

    username: str = Field(..., min_length=1)
    expires_at: datetime


__all__ = ["AdminAuthRequest", "AdminAuthResponse", "AdminSession"]
