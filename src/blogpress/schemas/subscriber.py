"""Subscriber-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from blogpress.models import SubscriberStatus
from blogpress.schemas.submission import EMAIL_PATTERN


class SubscribeStartRequest(BaseModel):
    """Ask for new-post digests; an OTP is mailed to confirm the address."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    name: str | None = Field(None, max_length=100)


class SubscribeVerifyRequest(BaseModel):
    """Confirm a subscription with the mailed OTP."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    otp: str = Field(..., min_length=4, max_length=10, pattern=r"^\d+$")


class UnsubscribeRequest(BaseModel):
    """Stop digests for an address."""

    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)


class SubscriberResponse(BaseModel):
    """Admin view of a subscriber."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None
    status: SubscriberStatus
    verified: bool
    created_at: datetime
    unsubscribed_at: datetime | None
