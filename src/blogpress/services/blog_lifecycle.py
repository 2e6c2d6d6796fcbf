"""Post creation, moderation and reader-facing queries.

Moderation is an explicit state machine. The only legal moves are
PENDING -> PUBLISHED (approve) and PENDING -> REJECTED (reject); every
other request fails with :class:`InvalidStateError` and leaves the post
untouched. Transitions are applied with a conditional UPDATE on the
current status, so two moderators acting at once cannot both succeed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from itertools import groupby

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogpress.core.errors import BadRequestError, InvalidStateError, NotFoundError
from blogpress.core.settings import Settings, settings
from blogpress.db.time import Clock, utcnow
from blogpress.models import Post, PostStatus
from blogpress.repositories.pagination import Page, paginate
from blogpress.repositories.post_repo import PostRepository
from blogpress.schemas.post import ArchiveMonth, ArchiveYear, PostContent, PostEditRequest
from blogpress.services import email_templates
from blogpress.services.notifier import Notifier
from blogpress.services.sanitizer import sanitize
from blogpress.utils.slug import candidate_slugs

logger = logging.getLogger(__name__)


class PostAction(StrEnum):
    """Moderator actions on a post."""

    APPROVE = "approved"
    REJECT = "rejected"


TRANSITIONS: dict[tuple[PostStatus, PostAction], PostStatus] = {
    (PostStatus.PENDING, PostAction.APPROVE): PostStatus.PUBLISHED,
    (PostStatus.PENDING, PostAction.REJECT): PostStatus.REJECTED,
}

SORT_ORDERS = {
    "recent": (Post.published_at.desc(), Post.id.desc()),
    "popular": (Post.likes_count.desc(), Post.published_at.desc(), Post.id.desc()),
    "oldest": (Post.published_at.asc(), Post.id.asc()),
    "most_commented": (Post.comments_count.desc(), Post.published_at.desc(), Post.id.desc()),
}
DEFAULT_SORT = "recent"

_REQUIRED_CONTENT_FIELDS = ("title", "content_html", "tags")


@dataclass(frozen=True)
class Author:
    """Identity attached to a submitted post."""

    name: str | None
    email: str
    mobile: str | None = None


def next_status(current: PostStatus, action: PostAction) -> PostStatus:
    """Return the status reached by ``action`` or raise InvalidStateError."""
    target = TRANSITIONS.get((current, action))
    if target is None:
        required = ", ".join(
            sorted(status.value for status, act in TRANSITIONS if act is action)
        )
        raise InvalidStateError(action.value, current.value, required)
    return target


class BlogLifecycle:
    """Service owning the post state machine and post queries."""

    def __init__(
        self,
        db: Session,
        *,
        notifier: Notifier | None = None,
        config: Settings = settings,
        clock: Clock = utcnow,
    ) -> None:
        self.db = db
        self.repo = PostRepository(db)
        self.notifier = notifier
        self.config = config
        self.clock = clock

    # -- writes -----------------------------------------------------------

    def create(self, payload: PostContent, author: Author) -> Post:
        """Persist a new PENDING post under a unique slug."""
        now = self.clock()
        post = Post(
            title=payload.title,
            excerpt=payload.excerpt,
            content_html=sanitize(payload.content_html),
            content_json=payload.content_json,
            featured_image_url=payload.featured_image_url,
            tags=list(payload.tags),
            author_name=author.name,
            author_email=author.email,
            author_mobile=author.mobile,
            status=PostStatus.PENDING,
            submitted_at=now,
            created_at=now,
            updated_at=now,
        )
        try:
            self.repo.insert_with_unique_slug(post, candidate_slugs(payload.title))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(post)
        logger.info("Blog created: %s by %s", post.slug, author.email)
        return post

    def approve(self, post_id: str, admin_id: str | None = None) -> Post:
        """Publish a pending post and mail its author."""
        post = self.get(post_id)
        now = self.clock()
        self._transition(
            post,
            PostAction.APPROVE,
            published_at=now,
            year=now.year,
            month=now.month,
            approved_by_admin_id=admin_id,
            rejection_reason=None,
            updated_at=now,
        )
        logger.info("Blog approved: %s by admin %s", post.id, admin_id)
        if self.notifier is not None and post.author_email:
            link = f"{self.config.frontend_url.rstrip('/')}/blogs/{post.slug}"
            subject, body = email_templates.approval(post.title, link)
            self.notifier.send_email(post.author_email, subject, body)
        return post

    def reject(self, post_id: str, reason: str) -> Post:
        """Reject a pending post with a reason and mail its author."""
        post = self.get(post_id)
        self._transition(
            post,
            PostAction.REJECT,
            rejection_reason=reason,
            year=None,
            month=None,
            updated_at=self.clock(),
        )
        logger.info("Blog rejected: %s", post.id)
        if self.notifier is not None and post.author_email:
            subject, body = email_templates.rejection(post.title, reason)
            self.notifier.send_email(post.author_email, subject, body)
        return post

    def edit(self, post_id: str, payload: PostEditRequest) -> Post:
        """Replace content fields that are present in ``payload``; the slug never changes."""
        post = self.get(post_id)
        changes = payload.model_dump(exclude_unset=True)
        # An explicit null never clears a required field.
        for field in _REQUIRED_CONTENT_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        if "content_html" in changes:
            changes["content_html"] = sanitize(changes["content_html"])
        for field, value in changes.items():
            setattr(post, field, value)
        post.updated_at = self.clock()
        self.db.commit()
        self.db.refresh(post)
        logger.info("Blog edited: %s fields=%s", post.id, sorted(changes))
        return post

    def delete(self, post_id: str) -> None:
        """Remove a post together with its comments and reactions."""
        post = self.get(post_id)
        removed = self.repo.delete_cascade(post)
        self.db.commit()
        logger.info("Blog deleted: %s (%d comments removed)", post_id, removed)

    def increment_views(self, post_id: str) -> None:
        """Count one view. Failures are logged and never reach the reader."""
        try:
            if not self.repo.adjust_counters(post_id, views_count=1):
                logger.warning("View not counted, blog %s no longer exists", post_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to increment views for blog %s", post_id, exc_info=True)

    def mark_notified(self, post_ids: Iterable[str]) -> int:
        """Flag posts as covered by a subscriber digest."""
        changed = self.repo.mark_notified(post_ids)
        self.db.commit()
        return changed

    # -- reads ------------------------------------------------------------

    def get(self, post_id: str) -> Post:
        post = self.repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Blog", "id", post_id)
        return post

    def get_published_by_slug(self, slug: str) -> Post:
        post = self.repo.get_by_slug(slug)
        if post is None or post.status != PostStatus.PUBLISHED:
            raise NotFoundError("Blog", "slug", slug)
        return post

    def list_admin(self, status: str | None, page: int, size: int) -> Page[Post]:
        """List posts for moderators, newest submission first."""
        query = self.db.query(Post)
        if status:
            query = query.filter(Post.status == parse_status(status))
        query = query.order_by(
            Post.submitted_at.desc(), Post.created_at.desc(), Post.id.desc()
        )
        return paginate(query, page, size)

    def list_published(
        self,
        *,
        search: str | None = None,
        year: int | None = None,
        month: int | None = None,
        sort: str | None = None,
        page: int = 0,
        size: int = 10,
    ) -> Page[Post]:
        """List published posts; unknown sort keys fall back to most recent."""
        order = SORT_ORDERS.get((sort or DEFAULT_SORT).lower(), SORT_ORDERS[DEFAULT_SORT])
        query = self.repo.published_query(search=search, year=year, month=month)
        return paginate(query.order_by(*order), page, size)

    def archive_index(self) -> list[ArchiveYear]:
        """Return published-post counts grouped by year then month, newest first."""
        rows = self.repo.archive_counts()
        return [
            ArchiveYear(
                year=year,
                months=[ArchiveMonth(month=month, count=count) for _, month, count in group],
            )
            for year, group in groupby(rows, key=lambda row: row[0])
        ]

    def list_unnotified_published(self) -> list[Post]:
        return self.repo.list_unnotified_published()

    # -- internals --------------------------------------------------------

    def _transition(self, post: Post, action: PostAction, **values: object) -> None:
        current = post.status
        target = next_status(current, action)
        result = self.db.execute(
            update(Post)
            .where(Post.id == post.id, Post.status == current)
            .values(status=target, **values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(post)
        if result.rowcount == 0:
            # Another moderator moved the post first.
            next_status(post.status, action)
        logger.debug("Blog %s moved %s -> %s", post.id, current.value, post.status.value)


def parse_status(raw: str) -> PostStatus:
    """Parse a status filter, rejecting unknown values with the valid set."""
    try:
        return PostStatus(raw.strip().upper())
    except ValueError as exc:
        valid = ", ".join(status.value for status in PostStatus)
        raise BadRequestError(f"Invalid status: {raw}. Valid values: {valid}") from exc
