"""Like/dislike toggling.

Each visitor holds at most one reaction per post. Repeating the same
reaction removes it, choosing the other one switches it. Each visitor's
toggles are serialized so the per-visitor write cap and the reaction row
are read and written together; the post counters themselves only ever move
through atomic UPDATE statements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogpress.core.errors import ConflictError, NotFoundError, RateLimitedError
from blogpress.core.settings import Settings, settings
from blogpress.db.time import Clock, utcnow
from blogpress.models import Reaction, ReactionType, ReactionWrite
from blogpress.repositories.post_repo import PostRepository
from blogpress.services.locks import KeyedLocks
from blogpress.utils.hash import hash_ip

logger = logging.getLogger(__name__)

_COUNTER_FOR: dict[ReactionType, str] = {
    ReactionType.LIKE: "likes_count",
    ReactionType.DISLIKE: "dislikes_count",
}

# Shared by every request handled by this process.
_REACTION_LOCKS = KeyedLocks()


class ReactionAction(StrEnum):
    """What a toggle did to the visitor's reaction."""

    ADDED = "ADDED"
    REMOVED = "REMOVED"
    SWITCHED = "SWITCHED"


@dataclass(frozen=True)
class ReactionResult:
    """Post counters after a toggle, with the visitor's resulting reaction."""

    post_id: str
    likes_count: int
    dislikes_count: int
    user_reaction: ReactionType | None
    action: ReactionAction | None = None


class ReactionToggle:
    """Service applying reader reactions to posts."""

    def __init__(
        self,
        db: Session,
        *,
        config: Settings = settings,
        clock: Clock = utcnow,
        locks: KeyedLocks = _REACTION_LOCKS,
    ) -> None:
        self.db = db
        self.repo = PostRepository(db)
        self.config = config
        self.clock = clock
        self.locks = locks

    def toggle(
        self,
        post_id: str,
        visitor_key: str,
        reaction_type: ReactionType,
        ip_address: str | None = None,
    ) -> ReactionResult:
        """Add, remove or switch the visitor's reaction.

        Raises:
            NotFoundError: If the post does not exist.
            RateLimitedError: If the visitor exceeded the per-window write cap.
        """
        if self.repo.get_by_id(post_id) is None:
            raise NotFoundError("Blog", "id", post_id)

        with self.locks.hold(visitor_key):
            now = self.clock()
            self._check_rate_limit(visitor_key, now)
            self._prune_writes(now)

            existing = self._current(post_id, visitor_key)
            deltas: dict[str, int] = {}
            if existing is None:
                self.db.add(
                    Reaction(
                        post_id=post_id,
                        visitor_key=visitor_key,
                        reaction_type=reaction_type,
                        ip_hash=hash_ip(ip_address, self.config.effective_ip_hash_salt),
                        created_at=now,
                        updated_at=now,
                    )
                )
                deltas[_COUNTER_FOR[reaction_type]] = 1
                action, user_reaction = ReactionAction.ADDED, reaction_type
            elif existing.reaction_type == reaction_type:
                self.db.delete(existing)
                deltas[_COUNTER_FOR[reaction_type]] = -1
                action, user_reaction = ReactionAction.REMOVED, None
            else:
                deltas[_COUNTER_FOR[existing.reaction_type]] = -1
                deltas[_COUNTER_FOR[reaction_type]] = 1
                existing.reaction_type = reaction_type
                existing.updated_at = now
                action, user_reaction = ReactionAction.SWITCHED, reaction_type

            self.db.add(ReactionWrite(visitor_key=visitor_key, post_id=post_id, created_at=now))
            try:
                self.db.flush()
                self.repo.adjust_counters(post_id, **deltas)
                self.db.commit()
            except IntegrityError as exc:
                # Another process inserted the same (post, visitor) row first.
                self.db.rollback()
                raise ConflictError("Reaction changed concurrently, please retry.") from exc

        logger.info(
            "Reaction %s on blog %s: %s", action.value, post_id, reaction_type.value
        )
        likes, dislikes = self.repo.counters(post_id) or (0, 0)
        return ReactionResult(post_id, likes, dislikes, user_reaction, action)

    def status(self, post_id: str, visitor_key: str | None = None) -> ReactionResult:
        """Read counters and, when a visitor is given, their current reaction."""
        counters = self.repo.counters(post_id)
        if counters is None:
            raise NotFoundError("Blog", "id", post_id)
        user_reaction = None
        if visitor_key:
            existing = self._current(post_id, visitor_key)
            user_reaction = existing.reaction_type if existing is not None else None
        return ReactionResult(post_id, counters[0], counters[1], user_reaction)

    def _current(self, post_id: str, visitor_key: str) -> Reaction | None:
        stmt = select(Reaction).where(
            Reaction.post_id == post_id, Reaction.visitor_key == visitor_key
        )
        return self.db.execute(stmt).scalars().first()

    def _prune_writes(self, now: datetime) -> None:
        """Drop throttle rows that have aged out of every visitor's window."""
        since = now - timedelta(seconds=self.config.rate_limit_window_seconds)
        self.db.execute(
            delete(ReactionWrite)
            .where(ReactionWrite.created_at < since)
            .execution_options(synchronize_session=False)
        )

    def _check_rate_limit(self, visitor_key: str, now: datetime) -> None:
        window = self.config.rate_limit_window_seconds
        since = now - timedelta(seconds=window)
        stmt = (
            select(func.count())
            .select_from(ReactionWrite)
            .where(ReactionWrite.visitor_key == visitor_key, ReactionWrite.created_at >= since)
        )
        recent = self.db.execute(stmt).scalar_one()
        if recent >= self.config.reactions_per_minute:
            logger.warning("Reaction rate limit hit for visitor %s", visitor_key)
            raise RateLimitedError(
                "Too many reactions. Please slow down.",
                retry_after_seconds=window,
            )
