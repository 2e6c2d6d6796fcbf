"""Schemas for moderator authentication and review actions."""
from __future__ import annotations

from pydantic import BaseModel, Field


class AdminTokenRequest(BaseModel):
    """Moderator credentials."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Bearer token for the admin API."""

    access_token: str
    token_type: str = "bearer"


class RejectRequest(BaseModel):
    """Reason sent to the author when a submission is rejected."""

    reason: str = Field(..., min_length=1, max_length=2000)
