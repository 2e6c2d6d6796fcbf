"""Comment-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from blogpress.models import CommentStatus


class CommentCreate(BaseModel):
    """Reader comment. ``website`` is a honeypot and must stay empty."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str | None = Field(None, max_length=254)
    comment_text: str = Field(..., min_length=1, max_length=2000)
    website: str | None = Field(None, description="Leave blank")


class CommentResponse(BaseModel):
    """Public comment representation; email and IP hash are never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    name: str
    comment_text: str
    status: CommentStatus
    created_at: datetime
