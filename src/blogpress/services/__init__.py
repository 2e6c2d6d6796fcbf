# src/blogpress/services/__init__.py
"""Business logic services for the BlogPress application."""

from .blog_lifecycle import BlogLifecycle
from .comments import CommentModeration
from .notification_gate import NotificationGate, NotificationWorker
from .otp import OtpEngine
from .reactions import ReactionToggle
from .submission import SubmissionPipeline
from .subscribers import SubscriptionManager

__all__ = [
    "BlogLifecycle",
    "CommentModeration",
    "NotificationGate",
    "NotificationWorker",
    "OtpEngine",
    "ReactionToggle",
    "SubmissionPipeline",
    "SubscriptionManager",
]
