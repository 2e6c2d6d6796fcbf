"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from blogpress.core.security import decode_admin_token
from blogpress.core.settings import settings
from blogpress.db.session import get_db
from blogpress.db.time import Clock, utcnow
from blogpress.services.blog_lifecycle import BlogLifecycle
from blogpress.services.comments import CommentModeration
from blogpress.services.notifier import Notifier, get_notifier
from blogpress.services.otp import OtpEngine
from blogpress.services.pending import PendingSubmissionCache, get_pending_cache
from blogpress.services.reactions import ReactionToggle
from blogpress.services.submission import SubmissionPipeline
from blogpress.services.subscribers import SubscriptionManager

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)


def get_clock() -> Clock:
    """Return the wall clock used by services; overridden in tests."""
    return utcnow


# Type aliases for injected infrastructure
SessionDep = Annotated[Session, Depends(get_db)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]
PendingCacheDep = Annotated[PendingSubmissionCache, Depends(get_pending_cache)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def get_current_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the moderator id carried by the bearer token.

    Raises:
        HTTPException: If the token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    subject = decode_admin_token(credentials.credentials)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


CurrentAdminDep = Annotated[str, Depends(get_current_admin)]


def client_ip(request: Request) -> str | None:
    """Return the peer address, or the first X-Forwarded-For hop behind a trusted proxy."""
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return request.client.host if request.client else None


ClientIpDep = Annotated[str | None, Depends(client_ip)]


def get_otp_engine(db: SessionDep, notifier: NotifierDep, clock: ClockDep) -> OtpEngine:
    return OtpEngine(db, notifier, clock=clock)


OtpEngineDep = Annotated[OtpEngine, Depends(get_otp_engine)]


def get_blog_lifecycle(db: SessionDep, notifier: NotifierDep, clock: ClockDep) -> BlogLifecycle:
    return BlogLifecycle(db, notifier=notifier, clock=clock)


BlogLifecycleDep = Annotated[BlogLifecycle, Depends(get_blog_lifecycle)]


def get_submission_pipeline(
    otp: OtpEngineDep,
    cache: PendingCacheDep,
    lifecycle: BlogLifecycleDep,
    notifier: NotifierDep,
) -> SubmissionPipeline:
    return SubmissionPipeline(otp, cache, lifecycle, notifier)


SubmissionPipelineDep = Annotated[SubmissionPipeline, Depends(get_submission_pipeline)]


def get_reaction_toggle(db: SessionDep, clock: ClockDep) -> ReactionToggle:
    return ReactionToggle(db, clock=clock)


ReactionToggleDep = Annotated[ReactionToggle, Depends(get_reaction_toggle)]


def get_comment_moderation(db: SessionDep, clock: ClockDep) -> CommentModeration:
    return CommentModeration(db, clock=clock)


CommentModerationDep = Annotated[CommentModeration, Depends(get_comment_moderation)]


def get_subscription_manager(db: SessionDep, otp: OtpEngineDep, clock: ClockDep) -> SubscriptionManager:
    return SubscriptionManager(db, otp, clock=clock)


SubscriptionManagerDep = Annotated[SubscriptionManager, Depends(get_subscription_manager)]
