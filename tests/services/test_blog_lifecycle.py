"""Tests for post creation, moderation and listing."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import func, select

from blogpress.core.errors import BadRequestError, InvalidStateError, NotFoundError
from blogpress.models import Comment, Post, PostStatus, Reaction, ReactionType
from blogpress.schemas.comment import CommentCreate
from blogpress.schemas.post import PostEditRequest
from blogpress.services.blog_lifecycle import PostAction, next_status


def _assert_archive_invariant(post: Post) -> None:
    if post.status == PostStatus.PUBLISHED:
        assert post.year is not None and post.month is not None
    else:
        assert post.year is None and post.month is None


def test_create_makes_pending_post_with_sanitized_body(make_post, clock) -> None:
    post = make_post(content_html='<p onclick="x()">Hi</p><script>alert(1)</script>')

    assert post.status == PostStatus.PENDING
    assert post.slug == "hello-world"
    assert "<script" not in post.content_html
    assert "onclick" not in post.content_html
    assert post.submitted_at is not None
    assert post.published_at is None
    assert post.tags == ["intro", "news"]
    _assert_archive_invariant(post)


def test_duplicate_titles_get_counter_suffixes(make_post) -> None:
    slugs = [make_post("Hello World").slug for _ in range(3)]
    assert slugs == ["hello-world", "hello-world-1", "hello-world-2"]


def test_title_without_slug_characters_falls_back(make_post) -> None:
    assert make_post("!!!").slug == "post"
    assert make_post("???").slug == "post-1"


def test_approve_publishes_and_mails_author(lifecycle, pending_post, notifier, clock) -> None:
    post = lifecycle.approve(pending_post.id, "moderator-1")

    assert post.status == PostStatus.PUBLISHED
    assert (post.year, post.month) == (2026, 3)
    assert post.published_at is not None
    assert post.approved_by_admin_id == "moderator-1"
    assert post.rejection_reason is None
    _assert_archive_invariant(post)
    assert "Your blog is now live!" in notifier.subjects("a@x.com")
    _, _, body = notifier.to("a@x.com")[-1]
    assert "/blogs/hello-world" in body


def test_approve_twice_fails_second_time(lifecycle, pending_post) -> None:
    lifecycle.approve(pending_post.id)

    with pytest.raises(InvalidStateError) as excinfo:
        lifecycle.approve(pending_post.id)

    assert excinfo.value.current == "PUBLISHED"
    assert excinfo.value.required == "PENDING"
    assert excinfo.value.message == "Only PENDING blogs can be approved. Current status: PUBLISHED"


def test_reject_records_reason_and_blocks_approval(lifecycle, pending_post, notifier) -> None:
    post = lifecycle.reject(pending_post.id, "Off topic")

    assert post.status == PostStatus.REJECTED
    assert post.rejection_reason == "Off topic"
    _assert_archive_invariant(post)
    assert "Update on your blog submission" in notifier.subjects("a@x.com")

    with pytest.raises(InvalidStateError):
        lifecycle.approve(pending_post.id)
    with pytest.raises(InvalidStateError):
        lifecycle.reject(pending_post.id, "again")


def test_transition_table_only_moves_from_pending() -> None:
    assert next_status(PostStatus.PENDING, PostAction.APPROVE) is PostStatus.PUBLISHED
    assert next_status(PostStatus.PENDING, PostAction.REJECT) is PostStatus.REJECTED
    for status in (PostStatus.DRAFT, PostStatus.PUBLISHED, PostStatus.REJECTED):
        for action in PostAction:
            with pytest.raises(InvalidStateError):
                next_status(status, action)


def test_unknown_post_is_not_found(lifecycle) -> None:
    with pytest.raises(NotFoundError):
        lifecycle.approve("missing")
    with pytest.raises(NotFoundError):
        lifecycle.get("missing")


def test_edit_keeps_slug_and_resanitizes(lifecycle, pending_post) -> None:
    post = lifecycle.edit(
        pending_post.id,
        PostEditRequest(
            title="Completely New Title",
            content_html='<p>New</p><img src="javascript:alert(1)">',
            tags=["a", "a", "b"],
        ),
    )

    assert post.slug == "hello-world"
    assert post.title == "Completely New Title"
    assert "javascript" not in post.content_html
    assert post.tags == ["a", "b"]
    assert post.excerpt == "A first post"


def test_edit_ignores_null_for_required_fields(lifecycle, pending_post) -> None:
    original_body = pending_post.content_html

    post = lifecycle.edit(
        pending_post.id,
        PostEditRequest.model_validate(
            {"content_html": None, "title": None, "tags": None, "excerpt": None}
        ),
    )

    assert post.content_html == original_body
    assert post.content_html
    assert post.title == "Hello World"
    assert post.tags == ["intro", "news"]
    assert post.excerpt is None


def test_delete_cascades_comments_and_reactions(
    lifecycle, published_post, comments, reactions, db_session
) -> None:
    comments.add(published_post.id, CommentCreate(name="R", comment_text="Nice"), "10.0.0.1")
    reactions.toggle(published_post.id, "visitor-1", ReactionType.LIKE)

    lifecycle.delete(published_post.id)

    assert db_session.execute(select(func.count()).select_from(Comment)).scalar_one() == 0
    assert db_session.execute(select(func.count()).select_from(Reaction)).scalar_one() == 0
    with pytest.raises(NotFoundError):
        lifecycle.delete(published_post.id)


def test_published_by_slug_hides_unpublished(lifecycle, pending_post) -> None:
    with pytest.raises(NotFoundError):
        lifecycle.get_published_by_slug(pending_post.slug)

    lifecycle.approve(pending_post.id)
    assert lifecycle.get_published_by_slug(pending_post.slug).id == pending_post.id


def test_increment_views_is_best_effort(lifecycle, published_post, db_session) -> None:
    lifecycle.increment_views(published_post.id)
    lifecycle.increment_views(published_post.id)
    lifecycle.increment_views("missing")

    db_session.refresh(published_post)
    assert published_post.views_count == 2


def test_archive_index_groups_by_year_and_month(publish_post, make_post, lifecycle) -> None:
    publish_post("March one", published_at=datetime(2026, 3, 2, tzinfo=UTC))
    publish_post("March two", published_at=datetime(2026, 3, 20, tzinfo=UTC))
    publish_post("January", published_at=datetime(2026, 1, 5, tzinfo=UTC))
    make_post("Still pending")

    archive = [entry.model_dump() for entry in lifecycle.archive_index()]

    assert archive == [
        {"year": 2026, "months": [{"month": 3, "count": 2}, {"month": 1, "count": 1}]}
    ]


def test_archive_index_orders_years_descending(publish_post, lifecycle) -> None:
    publish_post("Old", published_at=datetime(2025, 12, 1, tzinfo=UTC))
    publish_post("New", published_at=datetime(2026, 2, 1, tzinfo=UTC))

    assert [entry.year for entry in lifecycle.archive_index()] == [2026, 2025]


def test_list_published_filters_and_sorts(publish_post, make_post, lifecycle, db_session) -> None:
    jan = publish_post("Python tips", published_at=datetime(2026, 1, 5, tzinfo=UTC))
    feb = publish_post("Rust notes", published_at=datetime(2026, 2, 5, tzinfo=UTC))
    mar = publish_post("More Python", published_at=datetime(2026, 3, 5, tzinfo=UTC))
    make_post("Python draft")
    feb.likes_count = 9
    jan.comments_count = 4
    db_session.commit()

    recent = lifecycle.list_published()
    assert [p.id for p in recent.items] == [mar.id, feb.id, jan.id]
    assert recent.total_elements == 3

    assert [p.id for p in lifecycle.list_published(sort="oldest").items] == [jan.id, feb.id, mar.id]
    assert lifecycle.list_published(sort="popular").items[0].id == feb.id
    assert lifecycle.list_published(sort="most_commented").items[0].id == jan.id
    assert [p.id for p in lifecycle.list_published(sort="bogus").items] == [mar.id, feb.id, jan.id]

    found = lifecycle.list_published(search="python")
    assert {p.id for p in found.items} == {jan.id, mar.id}

    assert [p.id for p in lifecycle.list_published(year=2026, month=2).items] == [feb.id]
    assert lifecycle.list_published(year=2025).total_elements == 0


def test_list_published_paginates(publish_post, lifecycle) -> None:
    for index in range(5):
        publish_post(f"Post {index}")

    page = lifecycle.list_published(page=1, size=2)

    assert len(page.items) == 2
    assert page.total_elements == 5
    assert page.total_pages == 3
    assert not page.first and not page.last


def test_list_admin_filters_by_status(lifecycle, make_post) -> None:
    pending = make_post("Pending one")
    published = make_post("Published one")
    lifecycle.approve(published.id)

    result = lifecycle.list_admin("pending", 0, 10)
    assert [p.id for p in result.items] == [pending.id]
    assert lifecycle.list_admin(None, 0, 10).total_elements == 2

    with pytest.raises(BadRequestError) as excinfo:
        lifecycle.list_admin("LIVE", 0, 10)
    assert "PENDING" in excinfo.value.message


def test_unnotified_published_and_mark_notified(publish_post, lifecycle) -> None:
    post = publish_post()
    assert [p.id for p in lifecycle.list_unnotified_published()] == [post.id]

    assert lifecycle.mark_notified([post.id]) == 1
    assert lifecycle.list_unnotified_published() == []
