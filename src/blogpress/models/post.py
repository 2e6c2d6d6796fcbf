# src/blogpress/models/post.py
"""SQLAlchemy models for blog posts."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from blogpress.db.session import Base
from blogpress.db.time import utcnow


class PostStatus(StrEnum):
    """Lifecycle status of a blog post."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


def new_id() -> str:
    """Return an opaque identifier for documents."""
    return uuid.uuid4().hex


class Post(Base):
    """A submitted blog post and its reader-facing counters.

    ``year`` and ``month`` are derived from ``published_at`` and exist only
    while the post is published; they back the archive index.
    """

    __tablename__ = "blog_post"
    __table_args__ = (
        CheckConstraint(
            "(status = 'PUBLISHED' AND year IS NOT NULL AND month IS NOT NULL)"
            " OR (status != 'PUBLISHED' AND year IS NULL AND month IS NULL)",
            name="ck_blog_post_archive_fields",
        ),
        CheckConstraint(
            "views_count >= 0 AND likes_count >= 0 AND dislikes_count >= 0"
            " AND comments_count >= 0",
            name="ck_blog_post_counters_non_negative",
        ),
        Index("ix_blog_post_status_year_month", "status", "year", "month"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content_html: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Optional editor document (e.g. TipTap JSON) stored verbatim.
    content_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    featured_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    author_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    author_email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    author_mobile: Mapped[str | None] = mapped_column(String(32), nullable=True)

    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, native_enum=False, length=16),
        nullable=False,
        default=PostStatus.PENDING,
        index=True,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    approved_by_admin_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    month: Mapped[int | None] = mapped_column(Integer, nullable=True)

    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dislikes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Set once the hourly subscriber digest has covered this post.
    email_sent: Mapped[bool] = mapped_column(default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
