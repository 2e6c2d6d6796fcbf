"""Schemas for the three-step author submission flow."""
from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from blogpress.schemas.post import PostContent

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SubmissionStep(StrEnum):
    """Stage reached by a submission response."""

    START = "START"
    VERIFY = "VERIFY"
    FINISH = "FINISH"


class SubmissionStartRequest(PostContent):
    """Full draft plus author identity, held until the email is verified."""

    author_name: str = Field(..., min_length=1, max_length=100)
    author_email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    author_mobile: str | None = Field(None, max_length=32)


class SubmissionVerifyRequest(BaseModel):
    """OTP check for a pending submission."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    otp: str = Field(..., min_length=4, max_length=10, pattern=r"^\d+$")


class SubmissionFinishRequest(BaseModel):
    """Promote the verified draft into a pending post."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)


class SubmissionResponse(BaseModel):
    """Outcome of one submission step."""

    message: str
    step: SubmissionStep
    email: str
    reference_id: str | None = None
