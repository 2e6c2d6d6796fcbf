# src/blogpress/api/v1/endpoints/subscribers.py
"""Newsletter subscription endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from blogpress.api.v1.dependencies import SubscriptionManagerDep
from blogpress.schemas.common import MessageResponse
from blogpress.schemas.subscriber import (
    SubscribeStartRequest,
    SubscribeVerifyRequest,
    UnsubscribeRequest,
)

router = APIRouter(prefix="/blogs/subscribe", tags=["subscribers"])


@router.post("/start", response_model=MessageResponse)
def start_subscription(
    request: SubscribeStartRequest,
    manager: SubscriptionManagerDep,
) -> MessageResponse:
    manager.start(request.email, request.name)
    return MessageResponse(message="OTP sent to your email. Please verify to subscribe.")


@router.post("/verify-otp", response_model=MessageResponse)
def verify_subscription(
    request: SubscribeVerifyRequest,
    manager: SubscriptionManagerDep,
) -> MessageResponse:
    manager.verify(request.email, request.otp)
    return MessageResponse(message="Subscription confirmed. Welcome aboard!")


@router.post("/unsubscribe", response_model=MessageResponse)
def unsubscribe(request: UnsubscribeRequest, manager: SubscriptionManagerDep) -> MessageResponse:
    manager.unsubscribe(request.email)
    return MessageResponse(message="You have been unsubscribed.")
