"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterable, Iterator

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from blogpress.models import Comment, Post, PostStatus, Reaction, ReactionWrite

__all__ = ["PostRepository", "COUNTER_COLUMNS"]

COUNTER_COLUMNS: dict[str, InstrumentedAttribute[int]] = {
    "views_count": Post.views_count,
    "likes_count": Post.likes_count,
    "dislikes_count": Post.dislikes_count,
    "comments_count": Post.comments_count,
}


def _floored(column: InstrumentedAttribute[int], delta: int):
    """SQL expression adding ``delta`` to ``column`` without dropping below zero."""
    if delta >= 0:
        return column + delta
    return case((column + delta > 0, column + delta), else_=0)


class PostRepository:
    """Thin wrapper around database access for post entities.

    Counter updates are single UPDATE statements evaluated by the database,
    so concurrent writers never lose increments.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: str) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def get_by_slug(self, slug: str) -> Post | None:
        """Return a post by its unique slug."""
        result = self.session.execute(select(Post).where(Post.slug == slug))
        return result.scalars().first()

    def slug_exists(self, slug: str) -> bool:
        """Return True if a post already uses ``slug``."""
        stmt = select(func.count()).select_from(Post).where(Post.slug == slug)
        return bool(self.session.execute(stmt).scalar_one())

    def insert_with_unique_slug(self, post: Post, candidates: Iterator[str]) -> Post:
        """Persist ``post`` under the first free slug produced by ``candidates``.

        The unique index decides ties between concurrent writers: a collision
        on flush rolls back to a savepoint and the next candidate is tried.
        """
        for slug in candidates:
            if self.slug_exists(slug):
                continue
            post.slug = slug
            try:
                with self.session.begin_nested():
                    self.session.add(post)
            except IntegrityError:
                continue
            return post
        raise RuntimeError("slug candidates exhausted")  # pragma: no cover - infinite generator

    def adjust_counters(self, post_id: str, **deltas: int) -> bool:
        """Atomically add the given deltas to counter columns.

        Negative deltas are floored at zero. Returns False if the post is gone.
        """
        values = {}
        for name, delta in deltas.items():
            if delta:
                values[name] = _floored(COUNTER_COLUMNS[name], delta)
        if not values:
            return self.get_by_id(post_id) is not None
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def counters(self, post_id: str) -> tuple[int, int] | None:
        """Return fresh (likes, dislikes) straight from the database."""
        row = self.session.execute(
            select(Post.likes_count, Post.dislikes_count).where(Post.id == post_id)
        ).first()
        if row is None:
            return None
        return int(row[0]), int(row[1])

    def published_query(
        self,
        *,
        search: str | None = None,
        year: int | None = None,
        month: int | None = None,
    ):
        """Return a legacy query over published posts with optional filters."""
        query = self.session.query(Post).filter(Post.status == PostStatus.PUBLISHED)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Post.title.ilike(pattern), Post.excerpt.ilike(pattern)))
        if year is not None:
            query = query.filter(Post.year == year)
            if month is not None:
                query = query.filter(Post.month == month)
        return query

    def archive_counts(self) -> list[tuple[int, int, int]]:
        """Return (year, month, count) for published posts, newest first."""
        stmt = (
            select(Post.year, Post.month, func.count(Post.id))
            .where(Post.status == PostStatus.PUBLISHED)
            .group_by(Post.year, Post.month)
            .order_by(Post.year.desc(), Post.month.desc())
        )
        return [
            (int(year), int(month), int(count))
            for year, month, count in self.session.execute(stmt)
            if year is not None and month is not None
        ]

    def list_unnotified_published(self) -> list[Post]:
        """Return published posts not yet covered by a subscriber digest."""
        stmt = (
            select(Post)
            .where(Post.status == PostStatus.PUBLISHED, Post.email_sent.is_(False))
            .order_by(Post.published_at.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def mark_notified(self, post_ids: Iterable[str]) -> int:
        """Flag posts as notified and return how many rows changed."""
        ids = list(post_ids)
        if not ids:
            return 0
        result = self.session.execute(
            update(Post)
            .where(Post.id.in_(ids))
            .values(email_sent=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cascade(self, post: Post) -> int:
        """Delete a post with its comments and reactions; return comments removed."""
        removed = self.session.execute(delete(Comment).where(Comment.post_id == post.id))
        self.session.execute(delete(Reaction).where(Reaction.post_id == post.id))
        self.session.execute(delete(ReactionWrite).where(ReactionWrite.post_id == post.id))
        self.session.delete(post)
        return removed.rowcount
