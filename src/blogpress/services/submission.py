"""Three-step author submission: start, verify, finish.

A draft only becomes a post once its author has proven control of the
email address. ``finish`` checks verification before consuming the
draft, and hands the draft back if creating the post fails, so a retry
is always possible after an error.
"""

from __future__ import annotations

import logging

from blogpress.core.errors import NoPendingDraftError, NotVerifiedError
from blogpress.models import OtpPurpose
from blogpress.schemas.submission import (
    SubmissionResponse,
    SubmissionStartRequest,
    SubmissionStep,
)
from blogpress.services import email_templates
from blogpress.services.blog_lifecycle import Author, BlogLifecycle
from blogpress.services.notifier import Notifier
from blogpress.services.otp import OtpEngine
from blogpress.services.pending import PendingSubmissionCache

logger = logging.getLogger(__name__)


class SubmissionPipeline:
    """Coordinates the OTP engine, the draft cache and post creation."""

    def __init__(
        self,
        otp: OtpEngine,
        cache: PendingSubmissionCache,
        lifecycle: BlogLifecycle,
        notifier: Notifier,
    ) -> None:
        self.otp = otp
        self.cache = cache
        self.lifecycle = lifecycle
        self.notifier = notifier

    def start(self, draft: SubmissionStartRequest) -> SubmissionResponse:
        """Hold the draft and mail a passcode to its author."""
        email = draft.author_email
        self.cache.put(email, draft)
        self.otp.issue(email, OtpPurpose.SUBMISSION)
        logger.info("Submission started for %s", email)
        return SubmissionResponse(
            message="OTP sent to your email. Please verify to continue.",
            step=SubmissionStep.START,
            email=email,
        )

    def verify(self, email: str, code: str) -> SubmissionResponse:
        self.otp.verify(email, code, OtpPurpose.SUBMISSION)
        logger.info("Submission email verified for %s", email)
        return SubmissionResponse(
            message="Email verified successfully. You can now finish your submission.",
            step=SubmissionStep.VERIFY,
            email=email,
        )

    def finish(self, email: str) -> SubmissionResponse:
        """Turn the verified draft into a PENDING post.

        Raises:
            NotVerifiedError: If the latest submission OTP is not verified.
            NoPendingDraftError: If no draft is held for ``email``.
        """
        if not self.otp.is_verified(email, OtpPurpose.SUBMISSION):
            raise NotVerifiedError()
        draft = self.cache.take(email)
        if draft is None:
            raise NoPendingDraftError()

        author = Author(name=draft.author_name, email=email, mobile=draft.author_mobile)
        try:
            post = self.lifecycle.create(draft, author)
        except Exception:
            self.cache.restore(email, draft)
            logger.error("Submission for %s failed; draft restored", email, exc_info=True)
            raise

        subject, body = email_templates.submission_received(post.title, post.id)
        self.notifier.send_email(email, subject, body)
        logger.info("Submission finished for %s: blog %s", email, post.id)
        return SubmissionResponse(
            message="Blog submitted successfully! It will be reviewed by our team.",
            step=SubmissionStep.FINISH,
            email=email,
            reference_id=post.id,
        )
