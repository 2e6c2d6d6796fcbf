# src/blogpress/models/reaction.py
"""Models capturing like/dislike reactions on posts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from blogpress.db.session import Base
from blogpress.db.time import utcnow


class ReactionType(StrEnum):
    """Kinds of reader reaction."""

    LIKE = "LIKE"
    DISLIKE = "DISLIKE"


class Reaction(Base):
    """Current reaction of one visitor on one post."""

    __tablename__ = "blog_reaction"
    __table_args__ = (
        # At most one reaction per visitor and post.
        UniqueConstraint("post_id", "visitor_key", name="uq_blog_reaction_post_visitor"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("blog_post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    visitor_key: Mapped[str] = mapped_column(String(128), nullable=False)
    reaction_type: Mapped[ReactionType] = mapped_column(
        Enum(ReactionType, native_enum=False, length=16),
        nullable=False,
    )
    ip_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
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


class ReactionWrite(Base):
    """Audit row for every accepted toggle, used for visitor throttling."""

    __tablename__ = "reaction_write"
    __table_args__ = (
        Index("ix_reaction_write_visitor_created", "visitor_key", "created_at"),
        Index("ix_reaction_write_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    visitor_key: Mapped[str] = mapped_column(String(128), nullable=False)
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("blog_post.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
