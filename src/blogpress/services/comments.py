"""Reader comments and their moderation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from blogpress.core.errors import NotFoundError, RateLimitedError, SpamDetectedError
from blogpress.core.settings import Settings, settings
from blogpress.db.time import Clock, utcnow
from blogpress.models import Comment, CommentStatus
from blogpress.repositories.pagination import Page, paginate
from blogpress.repositories.post_repo import PostRepository
from blogpress.schemas.comment import CommentCreate
from blogpress.utils.hash import hash_ip

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = "unknown"


class CommentModeration:
    """Service accepting reader comments and applying moderator actions.

    ``comments_count`` on a post tracks VISIBLE comments only. Hide and
    delete decide with a single conditional statement whether the comment
    was visible, so the counter moves at most once per comment.
    """

    def __init__(
        self,
        db: Session,
        *,
        config: Settings = settings,
        clock: Clock = utcnow,
    ) -> None:
        self.db = db
        self.repo = PostRepository(db)
        self.config = config
        self.clock = clock

    def add(self, post_id: str, payload: CommentCreate, ip_address: str | None = None) -> Comment:
        """Store a visible comment.

        Raises:
            NotFoundError: If the post does not exist.
            SpamDetectedError: If the honeypot field was filled in.
            RateLimitedError: If the client address posted too often.
        """
        if self.repo.get_by_id(post_id) is None:
            raise NotFoundError("Blog", "id", post_id)
        if payload.website and payload.website.strip():
            logger.warning("Honeypot triggered on blog %s", post_id)
            raise SpamDetectedError()

        now = self.clock()
        # Callers without a known address share one throttling bucket.
        ip_hash = hash_ip(ip_address or UNKNOWN_ADDRESS, self.config.effective_ip_hash_salt)
        self._check_rate_limit(ip_hash, now)

        comment = Comment(
            post_id=post_id,
            name=payload.name.strip(),
            email=payload.email,
            comment_text=payload.comment_text.strip(),
            status=CommentStatus.VISIBLE,
            ip_hash=ip_hash,
            created_at=now,
        )
        self.db.add(comment)
        self.db.flush()
        self.repo.adjust_counters(post_id, comments_count=1)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("Comment %s added to blog %s", comment.id, post_id)
        return comment

    def hide(self, comment_id: str) -> None:
        """Hide a visible comment; hiding an already hidden one changes nothing."""
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment", "id", comment_id)
        result = self.db.execute(
            update(Comment)
            .where(Comment.id == comment_id, Comment.status == CommentStatus.VISIBLE)
            .values(status=CommentStatus.HIDDEN)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.repo.adjust_counters(comment.post_id, comments_count=-1)
        self.db.commit()
        logger.info("Comment hidden: %s (changed=%s)", comment_id, bool(result.rowcount))

    def delete(self, comment_id: str) -> None:
        """Remove a comment permanently."""
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment", "id", comment_id)
        post_id = comment.post_id
        self.db.expunge(comment)

        visible = self.db.execute(
            delete(Comment)
            .where(Comment.id == comment_id, Comment.status == CommentStatus.VISIBLE)
            .execution_options(synchronize_session=False)
        )
        if visible.rowcount:
            self.repo.adjust_counters(post_id, comments_count=-1)
        else:
            other = self.db.execute(
                delete(Comment)
                .where(Comment.id == comment_id)
                .execution_options(synchronize_session=False)
            )
            if not other.rowcount:
                self.db.rollback()
                raise NotFoundError("Comment", "id", comment_id)
        self.db.commit()
        logger.info("Comment deleted: %s", comment_id)

    def list_visible(self, post_id: str, page: int, size: int) -> Page[Comment]:
        if self.repo.get_by_id(post_id) is None:
            raise NotFoundError("Blog", "id", post_id)
        query = (
            self.db.query(Comment)
            .filter(Comment.post_id == post_id, Comment.status == CommentStatus.VISIBLE)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return paginate(query, page, size)

    def list_pending(self, page: int, size: int) -> Page[Comment]:
        query = (
            self.db.query(Comment)
            .filter(Comment.status == CommentStatus.PENDING)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return paginate(query, page, size)

    def _check_rate_limit(self, ip_hash: str, now: datetime) -> None:
        window = self.config.rate_limit_window_seconds
        stmt = (
            select(func.count())
            .select_from(Comment)
            .where(
                Comment.ip_hash == ip_hash,
                Comment.created_at >= now - timedelta(seconds=window),
            )
        )
        if self.db.execute(stmt).scalar_one() >= self.config.comments_per_minute:
            logger.warning("Comment rate limit hit for %s", ip_hash)
            raise RateLimitedError(
                "Too many comments. Please wait a moment.",
                retry_after_seconds=window,
            )
