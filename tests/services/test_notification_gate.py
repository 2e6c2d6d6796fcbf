"""Tests for subscriber digests and the background worker."""

from __future__ import annotations

import asyncio

from blogpress.core.settings import settings
from blogpress.models import Subscriber, SubscriberStatus
from blogpress.services.notification_gate import NotificationGate, NotificationRun, NotificationWorker


def _subscriber(db_session, email: str, *, verified: bool = True, status=SubscriberStatus.ACTIVE) -> None:
    db_session.add(Subscriber(email=email, name=email.split("@")[0], verified=verified, status=status))
    db_session.commit()


def test_nothing_to_announce(db_session, notifier) -> None:
    assert NotificationGate(db_session, notifier).run_once() == NotificationRun()
    assert notifier.sent == []


def test_digest_goes_to_verified_active_subscribers(db_session, notifier, publish_post) -> None:
    first = publish_post("First post")
    second = publish_post("Second post")
    notifier.sent.clear()
    _subscriber(db_session, "yes@x.com")
    _subscriber(db_session, "unverified@x.com", verified=False)
    _subscriber(db_session, "gone@x.com", status=SubscriberStatus.UNSUBSCRIBED)

    run = NotificationGate(db_session, notifier).run_once()

    assert run == NotificationRun(posts=2, sent=1, failed=0)
    assert [to for to, _, _ in notifier.sent] == ["yes@x.com"]
    _, subject, body = notifier.sent[0]
    assert subject == "New blogs published on BlogPress!"
    assert f"/blogs/{first.slug}" in body and f"/blogs/{second.slug}" in body

    db_session.refresh(first)
    assert first.email_sent is True
    assert NotificationGate(db_session, notifier).run_once().posts == 0


def test_posts_marked_even_without_subscribers(db_session, notifier, publish_post, lifecycle) -> None:
    publish_post()

    run = NotificationGate(db_session, notifier).run_once()

    assert run == NotificationRun(posts=1, sent=0, failed=0)
    assert lifecycle.list_unnotified_published() == []


def test_delivery_failures_are_counted(db_session, notifier, publish_post, lifecycle) -> None:
    publish_post()
    _subscriber(db_session, "ok@x.com")
    _subscriber(db_session, "broken@x.com")
    notifier.fail_for.add("broken@x.com")

    run = NotificationGate(db_session, notifier).run_once()

    assert (run.sent, run.failed) == (1, 1)
    assert lifecycle.list_unnotified_published() == []


def test_pending_posts_are_not_announced(db_session, notifier, make_post) -> None:
    make_post()
    _subscriber(db_session, "yes@x.com")

    assert NotificationGate(db_session, notifier).run_once().posts == 0


async def test_worker_runs_gate_until_stopped(session_factory, notifier, publish_post, db_session) -> None:
    post = publish_post()
    _subscriber(db_session, "yes@x.com")
    notifier.sent.clear()
    config = settings.model_copy(
        update={"notification_enabled": True, "notification_interval_seconds": 0.1}
    )
    worker = NotificationWorker(session_factory, notifier, config=config)

    await worker.start()
    assert worker.running
    for _ in range(100):
        if notifier.sent:
            break
        await asyncio.sleep(0.05)
    await worker.stop()

    assert not worker.running
    assert [to for to, _, _ in notifier.sent] == ["yes@x.com"]
    db_session.refresh(post)
    assert post.email_sent is True


async def test_worker_disabled_by_default(session_factory, notifier) -> None:
    worker = NotificationWorker(session_factory, notifier)

    await worker.start()

    assert not worker.running
    await worker.stop()


async def test_worker_stop_is_prompt(session_factory, notifier) -> None:
    config = settings.model_copy(
        update={"notification_enabled": True, "notification_interval_seconds": 3600}
    )
    worker = NotificationWorker(session_factory, notifier, config=config)
    await worker.start()
    await asyncio.sleep(0.1)

    await asyncio.wait_for(worker.stop(), timeout=2)
    assert not worker.running
