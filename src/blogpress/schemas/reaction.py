"""Reaction-related Pydantic schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field

from blogpress.models import ReactionType


class ReactionRequest(BaseModel):
    """Toggle a like or dislike for the calling visitor."""

    reaction_type: ReactionType
    visitor_id: str = Field(..., min_length=1, max_length=128)


class ReactionResponse(BaseModel):
    """Counters after a toggle, plus the visitor's current reaction."""

    post_id: str
    likes_count: int
    dislikes_count: int
    user_reaction: ReactionType | None
    action: str | None = None
