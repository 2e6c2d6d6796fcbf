# src/blogpress/models/comment.py
"""Models for reader comments on posts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogpress.db.session import Base
from blogpress.db.time import utcnow
from blogpress.models.post import new_id


class CommentStatus(StrEnum):
    """Visibility of a comment."""

    VISIBLE = "VISIBLE"
    HIDDEN = "HIDDEN"
    PENDING = "PENDING"


class Comment(Base):
    """A reader comment. Only VISIBLE comments contribute to the post counter."""

    __tablename__ = "blog_comment"
    __table_args__ = (
        Index("ix_blog_comment_post_status", "post_id", "status"),
        Index("ix_blog_comment_ip_created", "ip_hash", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("blog_post.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    comment_text: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[CommentStatus] = mapped_column(
        Enum(CommentStatus, native_enum=False, length=16),
        nullable=False,
        default=CommentStatus.VISIBLE,
    )
    # Keyed one-way hash of the client address; raw IPs are never stored.
    ip_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
