"""Tests for like/dislike toggling."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from blogpress.core.errors import NotFoundError, RateLimitedError
from blogpress.models import ReactionType, ReactionWrite
from blogpress.repositories.post_repo import PostRepository
from blogpress.services.reactions import ReactionAction

LIKE = ReactionType.LIKE
DISLIKE = ReactionType.DISLIKE


def test_toggle_scenario_from_existing_counts(reactions, published_post, db_session) -> None:
    published_post.likes_count = 3
    published_post.dislikes_count = 1
    db_session.commit()

    added = reactions.toggle(published_post.id, "V", LIKE)
    assert (added.likes_count, added.dislikes_count, added.action) == (4, 1, ReactionAction.ADDED)
    assert added.user_reaction is LIKE

    removed = reactions.toggle(published_post.id, "V", LIKE)
    assert (removed.likes_count, removed.dislikes_count) == (3, 1)
    assert removed.action is ReactionAction.REMOVED
    assert removed.user_reaction is None


def test_add_switch_remove_cycle_restores_counts(reactions, published_post) -> None:
    before = reactions.status(published_post.id)

    assert reactions.toggle(published_post.id, "V", LIKE).action is ReactionAction.ADDED
    switched = reactions.toggle(published_post.id, "V", DISLIKE)
    assert switched.action is ReactionAction.SWITCHED
    assert (switched.likes_count, switched.dislikes_count) == (0, 1)
    removed = reactions.toggle(published_post.id, "V", DISLIKE)
    assert removed.action is ReactionAction.REMOVED

    assert (removed.likes_count, removed.dislikes_count) == (
        before.likes_count,
        before.dislikes_count,
    )


def test_visitors_are_independent(reactions, published_post) -> None:
    reactions.toggle(published_post.id, "V1", LIKE)
    result = reactions.toggle(published_post.id, "V2", LIKE)

    assert result.likes_count == 2
    assert reactions.status(published_post.id, "V1").user_reaction is LIKE
    assert reactions.status(published_post.id, "V3").user_reaction is None
    assert reactions.status(published_post.id).action is None


def test_unknown_post_is_not_found(reactions) -> None:
    with pytest.raises(NotFoundError):
        reactions.toggle("missing", "V", LIKE)
    with pytest.raises(NotFoundError):
        reactions.status("missing")


def test_rate_limit_counts_every_write(reactions, published_post, clock) -> None:
    for _ in range(10):
        reactions.toggle(published_post.id, "V", LIKE)

    with pytest.raises(RateLimitedError) as excinfo:
        reactions.toggle(published_post.id, "V", LIKE)
    assert excinfo.value.retry_after_seconds == 60
    assert reactions.status(published_post.id, "V").user_reaction is None

    # Other visitors are unaffected.
    assert reactions.toggle(published_post.id, "W", LIKE).action is ReactionAction.ADDED

    clock.advance(seconds=61)
    assert reactions.toggle(published_post.id, "V", LIKE).action is ReactionAction.ADDED


def test_expired_write_log_rows_are_pruned(reactions, published_post, db_session, clock) -> None:
    reactions.toggle(published_post.id, "V", LIKE)
    reactions.toggle(published_post.id, "W", LIKE)

    clock.advance(seconds=120)
    reactions.toggle(published_post.id, "V", LIKE)

    rows = db_session.execute(select(ReactionWrite.visitor_key)).scalars().all()
    assert rows == ["V"]


def test_counters_floor_at_zero(published_post, db_session) -> None:
    repo = PostRepository(db_session)
    assert repo.adjust_counters(published_post.id, likes_count=-1, dislikes_count=-5)
    db_session.commit()

    assert repo.counters(published_post.id) == (0, 0)
    assert not repo.adjust_counters("missing", likes_count=1)
