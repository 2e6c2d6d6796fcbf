"""Batch digests of newly published posts for subscribers.

This module provides the NotificationGate, which mails one digest per
verified subscriber covering every published post not yet announced, and
the NotificationWorker that runs it periodically alongside the API.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogpress.core.settings import Settings, settings
from blogpress.db.session import SessionLocal
from blogpress.services import email_templates
from blogpress.services.blog_lifecycle import BlogLifecycle
from blogpress.services.notifier import Notifier, get_notifier
from blogpress.services.otp import OtpEngine
from blogpress.services.subscribers import SubscriptionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationRun:
    """Summary of one digest batch."""

    posts: int = 0
    sent: int = 0
    failed: int = 0


class NotificationGate:
    """Announce newly published posts to subscribers, at most once per post.

    Posts are marked notified after the batch even if some deliveries
    failed or nobody is subscribed; delivery is best-effort by contract.
    """

    def __init__(self, db: Session, notifier: Notifier, *, config: Settings = settings) -> None:
        self.db = db
        self.notifier = notifier
        self.config = config
        self.lifecycle = BlogLifecycle(db, config=config)
        self.subscribers = SubscriptionManager(db, OtpEngine(db, notifier, config=config))

    def run_once(self) -> NotificationRun:
        posts = self.lifecycle.list_unnotified_published()
        if not posts:
            logger.debug("No new published blogs to announce")
            return NotificationRun()

        entries = [
            email_templates.DigestEntry(title=post.title, slug=post.slug, excerpt=post.excerpt)
            for post in posts
        ]
        recipients = self.subscribers.list_notifiable()
        sent = failed = 0
        for subscriber in recipients:
            subject, body = email_templates.new_posts_digest(
                subscriber.name, entries, self.config.frontend_url
            )
            try:
                self.notifier.send_email(subscriber.email, subject, body)
            except (OSError, RuntimeError) as exc:
                failed += 1
                logger.warning("Digest to %s failed: %s", subscriber.email, exc)
            else:
                sent += 1

        self.lifecycle.mark_notified(post.id for post in posts)
        logger.info(
            "Digest run: %d blog(s), %d subscriber(s) notified, %d failed",
            len(posts),
            sent,
            failed,
        )
        return NotificationRun(posts=len(posts), sent=sent, failed=failed)


class NotificationWorker:
    """Runs the notification gate on a fixed interval in the event loop."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        notifier: Notifier | None = None,
        *,
        config: Settings = settings,
    ) -> None:
        self.session_factory = session_factory
        self.notifier = notifier
        self.config = config
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background loop unless notifications are disabled."""
        if not self.config.notification_enabled:
            return
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    def run_once(self) -> NotificationRun:
        """Run one batch in a fresh session."""
        db = self.session_factory()
        try:
            return NotificationGate(db, self.notifier or get_notifier(), config=self.config).run_once()
        finally:
            db.close()

    async def _run(self) -> None:
        interval = max(0.1, float(self.config.notification_interval_seconds))
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self.run_once)
            except SQLAlchemyError as exc:
                logger.error("NotificationWorker database error: %s", exc, exc_info=True)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except TimeoutError:
                continue
