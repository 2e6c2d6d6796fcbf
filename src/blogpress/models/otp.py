# src/blogpress/models/otp.py
"""Models for one-time passcode verification records."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from blogpress.db.session import Base
from blogpress.db.time import utcnow


class OtpPurpose(StrEnum):
    """Flows that can request a passcode."""

    SUBMISSION = "SUBMISSION"
    SUBSCRIBE = "SUBSCRIBE"


class OtpRecord(Base):
    """A hashed passcode issued to an email address.

    Records are never deleted; the newest one per (email, purpose) is
    authoritative. The autoincrement id breaks ties between equal timestamps.
    """

    __tablename__ = "otp_verification"
    __table_args__ = (
        CheckConstraint("attempts_count >= 0", name="ck_otp_attempts_non_negative"),
        Index("ix_otp_email_purpose_created", "email", "purpose", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    purpose: Mapped[OtpPurpose] = mapped_column(
        Enum(OtpPurpose, native_enum=False, length=16),
        nullable=False,
    )
    # BLAKE3 hex digest; the plaintext code only ever leaves via email.
    otp_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attempts_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
