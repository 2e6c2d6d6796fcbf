"""Post-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogpress.models import PostStatus


def _dedupe_tags(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    seen: list[str] = []
    for tag in value:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class PostContent(BaseModel):
    """Editable content fields of a post."""

    title: str = Field(..., min_length=1, max_length=200)
    excerpt: str | None = Field(None, max_length=500)
    content_html: str = Field(..., min_length=1, description="Raw HTML body; sanitized on write")
    content_json: str | None = Field(None, description="Optional structured editor document")
    featured_image_url: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return _dedupe_tags(value) or []


class PostEditRequest(BaseModel):
    """Partial update of a post's content; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=200)
    excerpt: str | None = Field(None, max_length=500)
    content_html: str | None = None
    content_json: str | None = None
    featured_image_url: str | None = None
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str] | None) -> list[str] | None:
        return _dedupe_tags(value)


class PostSummary(BaseModel):
    """Public listing entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    excerpt: str | None
    featured_image_url: str | None
    author_name: str | None
    tags: list[str]
    published_at: datetime | None
    views_count: int
    likes_count: int
    dislikes_count: int
    comments_count: int


class PostDetail(PostSummary):
    """Public view of a published post."""

    content_html: str
    content_json: str | None
    year: int | None
    month: int | None


class AdminPostDetail(PostDetail):
    """Moderator view including author contact and review fields."""

    author_email: str
    author_mobile: str | None
    status: PostStatus
    submitted_at: datetime | None
    approved_by_admin_id: str | None
    rejection_reason: str | None
    email_sent: bool
    created_at: datetime
    updated_at: datetime


class ArchiveMonth(BaseModel):
    """Number of published posts in one month."""

    month: int
    count: int


class ArchiveYear(BaseModel):
    """Archive entry for one year, months newest first."""

    year: int
    months: list[ArchiveMonth]
