# src/blogpress/models/subscriber.py
"""Models for newsletter subscribers."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from blogpress.db.session import Base
from blogpress.db.time import utcnow
from blogpress.models.post import new_id


class SubscriberStatus(StrEnum):
    """Subscription state of an email address."""

    ACTIVE = "ACTIVE"
    UNSUBSCRIBED = "UNSUBSCRIBED"


class Subscriber(Base):
    """An email address that asked for new-post digests."""

    __tablename__ = "subscriber"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[SubscriberStatus] = mapped_column(
        Enum(SubscriberStatus, native_enum=False, length=16),
        nullable=False,
        default=SubscriberStatus.ACTIVE,
    )
    # Only verified ACTIVE subscribers receive digests.
    verified: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    unsubscribed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
