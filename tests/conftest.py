# tests/conftest.py
from __future__ import annotations

import os
import re
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blogpress")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from blogpress.api.v1.dependencies import get_clock
from blogpress.core.security import create_access_token
from blogpress.db.session import Base
from blogpress.db.session import get_db as app_get_session
from blogpress.main import app as fastapi_app
from blogpress.models import Post
from blogpress.schemas.submission import SubmissionStartRequest
from blogpress.services.blog_lifecycle import Author, BlogLifecycle
from blogpress.services.comments import CommentModeration
from blogpress.services.notifier import get_notifier
from blogpress.services.otp import OtpEngine
from blogpress.services.pending import InMemoryPendingSubmissionCache, get_pending_cache
from blogpress.services.reactions import ReactionToggle
from blogpress.services.submission import SubmissionPipeline
from blogpress.services.subscribers import SubscriptionManager

TEST_DB_URL = "sqlite://"
START_TIME = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
_OTP_IN_BODY = re.compile(r">(\d{6})</h1>")


class FrozenClock:
    """Test clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)

    def set(self, now: datetime) -> None:
        self.now = now


class RecordingNotifier:
    """Notifier that keeps every message in memory."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail_for: set[str] = set()

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        if to in self.fail_for:
            raise OSError(f"mailbox unavailable: {to}")
        self.sent.append((to, subject, html_body))

    def to(self, email: str) -> list[tuple[str, str, str]]:
        return [message for message in self.sent if message[0] == email]

    def subjects(self, email: str) -> list[str]:
        return [subject for _, subject, _ in self.to(email)]

    def last_code(self, email: str) -> str:
        for _, _, body in reversed(self.to(email)):
            match = _OTP_IN_BODY.search(body)
            if match:
                return match.group(1)
        raise AssertionError(f"no OTP mailed to {email}")


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(START_TIME)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def pending_cache() -> InMemoryPendingSubmissionCache:
    return InMemoryPendingSubmissionCache()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    notifier: RecordingNotifier,
    pending_cache: InMemoryPendingSubmissionCache,
    clock: FrozenClock,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_pending_cache] = lambda: pending_cache
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    """Return authorization headers for the moderator account."""
    return {"Authorization": f"Bearer {create_access_token('admin')}"}


@pytest.fixture()
def otp_engine(db_session: Session, notifier: RecordingNotifier, clock: FrozenClock) -> OtpEngine:
    return OtpEngine(db_session, notifier, clock=clock)


@pytest.fixture()
def lifecycle(db_session: Session, notifier: RecordingNotifier, clock: FrozenClock) -> BlogLifecycle:
    return BlogLifecycle(db_session, notifier=notifier, clock=clock)


@pytest.fixture()
def pipeline(
    otp_engine: OtpEngine,
    pending_cache: InMemoryPendingSubmissionCache,
    lifecycle: BlogLifecycle,
    notifier: RecordingNotifier,
) -> SubmissionPipeline:
    return SubmissionPipeline(otp_engine, pending_cache, lifecycle, notifier)


@pytest.fixture()
def reactions(db_session: Session, clock: FrozenClock) -> ReactionToggle:
    return ReactionToggle(db_session, clock=clock)


@pytest.fixture()
def comments(db_session: Session, clock: FrozenClock) -> CommentModeration:
    return CommentModeration(db_session, clock=clock)


@pytest.fixture()
def subscriptions(db_session: Session, otp_engine: OtpEngine, clock: FrozenClock) -> SubscriptionManager:
    return SubscriptionManager(db_session, otp_engine, clock=clock)


def build_draft(**overrides: Any) -> SubmissionStartRequest:
    """Return a valid submission draft."""
    data: dict[str, Any] = {
        "title": "Hello World",
        "excerpt": "A first post",
        "content_html": "<p>Hello <strong>readers</strong></p>",
        "tags": ["intro", "news"],
        "author_name": "Ada",
        "author_email": "a@x.com",
        "author_mobile": "+10000000000",
    }
    data.update(overrides)
    return SubmissionStartRequest(**data)


@pytest.fixture()
def make_post(lifecycle: BlogLifecycle) -> Callable[..., Post]:
    """Factory creating a PENDING post through the lifecycle service."""

    def _make(title: str = "Hello World", **overrides: Any) -> Post:
        draft = build_draft(title=title, **overrides)
        author = Author(name=draft.author_name, email=draft.author_email)
        return lifecycle.create(draft, author)

    return _make


@pytest.fixture()
def publish_post(
    make_post: Callable[..., Post],
    lifecycle: BlogLifecycle,
    clock: FrozenClock,
) -> Callable[..., Post]:
    """Factory creating a post and approving it at ``published_at`` (default: now)."""

    def _publish(
        title: str = "Hello World",
        published_at: datetime | None = None,
        **overrides: Any,
    ) -> Post:
        post = make_post(title, **overrides)
        if published_at is not None:
            clock.set(published_at)
        return lifecycle.approve(post.id, "admin")

    return _publish


@pytest.fixture()
def pending_post(make_post: Callable[..., Post]) -> Post:
    return make_post()


@pytest.fixture()
def published_post(publish_post: Callable[..., Post]) -> Post:
    return publish_post()


@pytest.fixture()
def draft_factory() -> Callable[..., SubmissionStartRequest]:
    return build_draft
