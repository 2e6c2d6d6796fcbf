"""Typed failures raised by the BlogPress core.

Every error carries a machine-readable ``kind`` and a human message. The HTTP
layer maps kinds to status codes; nothing in here knows about transport.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class BlogPressError(Exception):
    """Base class for expected, typed failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def extras(self) -> dict[str, Any]:
        """Return additional payload fields for the error response."""
        return {}


class NotFoundError(BlogPressError):
    """Raised when a requested entity does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, field: str, value: object) -> None:
        super().__init__(f"{entity} not found with {field}: '{value}'")
        self.entity = entity
        self.field = field
        self.value = value


class BadRequestError(BlogPressError):
    """Raised for malformed or policy-violating input."""

    kind = "bad_request"


class InvalidStateError(BadRequestError):
    """Raised when a lifecycle transition is attempted from the wrong status."""

    def __init__(self, action: str, current: str, required: str) -> None:
        super().__init__(
            f"Only {required} blogs can be {action}. Current status: {current}"
        )
        self.action = action
        self.current = current
        self.required = required

    def extras(self) -> dict[str, Any]:
        return {"current_status": self.current, "required_status": self.required}


class NotVerifiedError(BadRequestError):
    """Raised when a submission is finished before its OTP was verified."""

    def __init__(self) -> None:
        super().__init__("Email not verified. Please complete OTP verification first.")


class NoPendingDraftError(BadRequestError):
    """Raised when no draft is waiting for the given email."""

    def __init__(self) -> None:
        super().__init__(
            "No pending submission found for this email. "
            "Please start the submission process again."
        )


class SpamDetectedError(BadRequestError):
    """Raised when the comment honeypot field is filled in."""

    def __init__(self) -> None:
        super().__init__("Spam detected")


class RateLimitedError(BlogPressError):
    """Raised when a caller exceeds a throttle; carries a wait hint."""

    kind = "rate_limited"

    def __init__(self, message: str, retry_after_seconds: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds

    def extras(self) -> dict[str, Any]:
        if self.retry_after_seconds is None:
            return {}
        return {"retry_after_seconds": self.retry_after_seconds}


class VerificationFailure(StrEnum):
    """Distinguishable reasons an OTP verification can fail."""

    NOT_FOUND = "NOT_FOUND"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    EXPIRED = "EXPIRED"
    ATTEMPTS_EXCEEDED = "ATTEMPTS_EXCEEDED"
    INVALID_CODE = "INVALID_CODE"


_VERIFICATION_MESSAGES: dict[VerificationFailure, str] = {
    VerificationFailure.NOT_FOUND: "No OTP found for this email. Please request a new one.",
    VerificationFailure.ALREADY_VERIFIED: "OTP already verified.",
    VerificationFailure.EXPIRED: "OTP has expired. Please request a new one.",
    VerificationFailure.ATTEMPTS_EXCEEDED: (
        "Maximum OTP attempts exceeded. Please request a new OTP."
    ),
}


class VerificationFailedError(BlogPressError):
    """Raised when an OTP cannot be verified."""

    kind = "verification_failed"

    def __init__(
        self,
        reason: VerificationFailure,
        *,
        attempts_remaining: int | None = None,
    ) -> None:
        if reason is VerificationFailure.INVALID_CODE:
            message = f"Invalid OTP. {attempts_remaining} attempts remaining."
        else:
            message = _VERIFICATION_MESSAGES[reason]
        super().__init__(message)
        self.reason = reason
        self.attempts_remaining = attempts_remaining

    def extras(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"reason": self.reason.value}
        if self.attempts_remaining is not None:
            payload["attempts_remaining"] = self.attempts_remaining
        return payload


class ConflictError(BlogPressError):
    """Reserved for strict-uniqueness violations."""

    kind = "conflict"
