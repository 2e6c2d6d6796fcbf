"""Holding area for submission drafts awaiting email verification."""

from __future__ import annotations

from threading import Lock
from typing import Protocol

from blogpress.schemas.submission import SubmissionStartRequest


class PendingSubmissionCache(Protocol):
    """Store of at most one draft per author email."""

    def put(self, email: str, draft: SubmissionStartRequest) -> None:
        """Store ``draft``, replacing any earlier one."""
        ...

    def take(self, email: str) -> SubmissionStartRequest | None:
        """Remove and return the draft for ``email``."""
        ...

    def restore(self, email: str, draft: SubmissionStartRequest) -> None:
        """Put ``draft`` back unless a newer one arrived meanwhile."""
        ...


class InMemoryPendingSubmissionCache:
    """Process-local, non-durable cache; drafts are lost on restart."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._drafts: dict[str, SubmissionStartRequest] = {}

    def put(self, email: str, draft: SubmissionStartRequest) -> None:
        with self._lock:
            self._drafts[email] = draft

    def take(self, email: str) -> SubmissionStartRequest | None:
        with self._lock:
            return self._drafts.pop(email, None)

    def restore(self, email: str, draft: SubmissionStartRequest) -> None:
        with self._lock:
            self._drafts.setdefault(email, draft)

    def __len__(self) -> int:
        with self._lock:
            return len(self._drafts)


_CACHE = InMemoryPendingSubmissionCache()


def get_pending_cache() -> PendingSubmissionCache:
    """Return the process-wide draft cache."""
    return _CACHE
