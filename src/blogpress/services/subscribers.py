"""Newsletter subscription backed by email OTP."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from blogpress.core.errors import BadRequestError, NotFoundError
from blogpress.db.time import Clock, utcnow
from blogpress.models import OtpPurpose, Subscriber, SubscriberStatus
from blogpress.repositories.pagination import Page, paginate
from blogpress.services.otp import OtpEngine

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """Service managing digest subscribers."""

    def __init__(self, db: Session, otp: OtpEngine, *, clock: Clock = utcnow) -> None:
        self.db = db
        self.otp = otp
        self.clock = clock

    def get_by_email(self, email: str) -> Subscriber | None:
        stmt = select(Subscriber).where(Subscriber.email == email)
        return self.db.execute(stmt).scalars().first()

    def start(self, email: str, name: str | None = None) -> None:
        """Register (or re-activate) an address and mail it a confirmation OTP.

        Raises:
            BadRequestError: If the address is already an active, verified subscriber.
            RateLimitedError: If an OTP was sent within the resend cooldown.
        """
        subscriber = self.get_by_email(email)
        if subscriber is None:
            subscriber = Subscriber(
                email=email,
                name=name,
                status=SubscriberStatus.ACTIVE,
                verified=False,
                created_at=self.clock(),
            )
            self.db.add(subscriber)
        elif subscriber.status == SubscriberStatus.ACTIVE and subscriber.verified:
            raise BadRequestError("This email is already subscribed.")
        else:
            subscriber.status = SubscriberStatus.ACTIVE
            subscriber.verified = False
            subscriber.unsubscribed_at = None
            if name:
                subscriber.name = name
        self.db.commit()

        self.otp.issue(email, OtpPurpose.SUBSCRIBE)
        logger.info("Subscription started for %s", email)

    def verify(self, email: str, code: str) -> Subscriber:
        """Confirm an address with its OTP."""
        self.otp.verify(email, code, OtpPurpose.SUBSCRIBE)
        subscriber = self.get_by_email(email)
        if subscriber is None:
            raise NotFoundError("Subscriber", "email", email)
        subscriber.verified = True
        self.db.commit()
        self.db.refresh(subscriber)
        logger.info("Subscription verified for %s", email)
        return subscriber

    def unsubscribe(self, email: str) -> None:
        subscriber = self.get_by_email(email)
        if subscriber is None:
            raise NotFoundError("Subscriber", "email", email)
        subscriber.status = SubscriberStatus.UNSUBSCRIBED
        subscriber.unsubscribed_at = self.clock()
        self.db.commit()
        logger.info("Unsubscribed %s", email)

    def list_all(self, status: str | None, page: int, size: int) -> Page[Subscriber]:
        """List subscribers for moderators, newest first."""
        query = self.db.query(Subscriber)
        if status:
            try:
                parsed = SubscriberStatus(status.strip().upper())
            except ValueError as exc:
                valid = ", ".join(item.value for item in SubscriberStatus)
                raise BadRequestError(f"Invalid status: {status}. Valid values: {valid}") from exc
            query = query.filter(Subscriber.status == parsed)
        query = query.order_by(Subscriber.created_at.desc(), Subscriber.id.desc())
        return paginate(query, page, size)

    def list_notifiable(self) -> list[Subscriber]:
        """Return ACTIVE, verified subscribers."""
        stmt = (
            select(Subscriber)
            .where(Subscriber.status == SubscriberStatus.ACTIVE, Subscriber.verified.is_(True))
            .order_by(Subscriber.created_at.asc())
        )
        return list(self.db.execute(stmt).scalars())
