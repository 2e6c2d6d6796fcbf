"""One-time passcode issuance and verification.

Passcodes prove control of an email address for a short window. Only a
BLAKE3 digest is stored; the plaintext leaves the process once, by email.
Attempt accounting is done with conditional UPDATE statements so that
concurrent guesses for the same record can never exceed the attempt cap.
"""

from __future__ import annotations

import logging
import math
import secrets
import string
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from blogpress.core.errors import (
    RateLimitedError,
    VerificationFailedError,
    VerificationFailure,
)
from blogpress.core.settings import Settings, settings
from blogpress.db.time import Clock, as_utc, utcnow
from blogpress.models import OtpPurpose, OtpRecord
from blogpress.services import email_templates
from blogpress.services.locks import KeyedLocks
from blogpress.services.notifier import Notifier
from blogpress.utils.hash import hash_otp, otp_matches

logger = logging.getLogger(__name__)

# Serializes the cooldown check and insert per (email, purpose) in this process.
_ISSUE_LOCKS = KeyedLocks()


def generate_code(length: int) -> str:
    """Return a numeric code drawn from the OS CSPRNG."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


class OtpEngine:
    """Service issuing and checking passcodes for a fixed set of purposes."""

    def __init__(
        self,
        db: Session,
        notifier: Notifier,
        *,
        config: Settings = settings,
        clock: Clock = utcnow,
        locks: KeyedLocks = _ISSUE_LOCKS,
    ) -> None:
        self.db = db
        self.notifier = notifier
        self.config = config
        self.clock = clock
        self.locks = locks

    def latest(self, email: str, purpose: OtpPurpose) -> OtpRecord | None:
        """Return the authoritative (most recently created) record."""
        stmt = (
            select(OtpRecord)
            .where(OtpRecord.email == email, OtpRecord.purpose == purpose)
            .order_by(OtpRecord.created_at.desc(), OtpRecord.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def issue(self, email: str, purpose: OtpPurpose) -> None:
        """Issue a fresh passcode and mail it.

        Raises:
            RateLimitedError: If the previous code was issued within the cooldown.
        """
        with self.locks.hold((email, purpose)):
            now = self.clock()
            cooldown = timedelta(seconds=self.config.otp_resend_cooldown_seconds)
            previous = self.latest(email, purpose)
            if previous is not None:
                cooldown_end = as_utc(previous.created_at) + cooldown
                if now < cooldown_end:
                    wait = max(1, math.ceil((cooldown_end - now).total_seconds()))
                    raise RateLimitedError(
                        f"Please wait {wait} seconds before requesting a new OTP.",
                        retry_after_seconds=wait,
                    )

            code = generate_code(self.config.otp_length)
            record = OtpRecord(
                email=email,
                purpose=purpose,
                otp_hash=hash_otp(code),
                expires_at=now + timedelta(minutes=self.config.otp_expiry_minutes),
                attempts_count=0,
                created_at=now,
            )
            self.db.add(record)
            self.db.commit()

        self.notifier.send_email(
            email,
            email_templates.otp_subject(purpose),
            email_templates.otp_body(code, purpose, self.config.otp_expiry_minutes),
        )
        logger.info("OTP sent to %s for purpose %s", email, purpose.value)

    def verify(self, email: str, code: str, purpose: OtpPurpose) -> None:
        """Consume one attempt against the latest passcode.

        Raises:
            VerificationFailedError: With the specific failure reason.
        """
        record = self.latest(email, purpose)
        if record is None:
            raise VerificationFailedError(VerificationFailure.NOT_FOUND)
        self._raise_if_unusable(record)

        max_attempts = self.config.otp_max_attempts
        consumed = self.db.execute(
            update(OtpRecord)
            .where(
                OtpRecord.id == record.id,
                OtpRecord.verified_at.is_(None),
                OtpRecord.attempts_count < max_attempts,
            )
            .values(attempts_count=OtpRecord.attempts_count + 1)
            .execution_options(synchronize_session=False)
        )
        if consumed.rowcount == 0:
            # Lost a race with another verifier; report what it left behind.
            self.db.commit()
            self.db.refresh(record)
            self._raise_if_unusable(record)
            raise VerificationFailedError(VerificationFailure.ATTEMPTS_EXCEEDED)

        if not otp_matches(code, record.otp_hash):
            self.db.commit()
            self.db.refresh(record)
            remaining = max(0, max_attempts - record.attempts_count)
            raise VerificationFailedError(
                VerificationFailure.INVALID_CODE,
                attempts_remaining=remaining,
            )

        marked = self.db.execute(
            update(OtpRecord)
            .where(OtpRecord.id == record.id, OtpRecord.verified_at.is_(None))
            .values(verified_at=self.clock())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if marked.rowcount == 0:
            raise VerificationFailedError(VerificationFailure.ALREADY_VERIFIED)
        logger.info("OTP verified for %s purpose %s", email, purpose.value)

    def is_verified(self, email: str, purpose: OtpPurpose) -> bool:
        """Return True if the latest passcode for (email, purpose) was verified."""
        record = self.latest(email, purpose)
        return record is not None and record.verified_at is not None

    def _raise_if_unusable(self, record: OtpRecord) -> None:
        if record.verified_at is not None:
            raise VerificationFailedError(VerificationFailure.ALREADY_VERIFIED)
        if self.clock() > as_utc(record.expires_at):
            raise VerificationFailedError(VerificationFailure.EXPIRED)
        if record.attempts_count >= self.config.otp_max_attempts:
            raise VerificationFailedError(VerificationFailure.ATTEMPTS_EXCEEDED)
