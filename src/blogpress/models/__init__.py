"""SQLAlchemy models for the BlogPress application."""

from .comment import Comment, CommentStatus
from .otp import OtpPurpose, OtpRecord
from .post import Post, PostStatus
from .reaction import Reaction, ReactionType, ReactionWrite
from .subscriber import Subscriber, SubscriberStatus

__all__ = [
    "Comment", "CommentStatus",
    "OtpPurpose", "OtpRecord",
    "Post", "PostStatus",
    "Reaction", "ReactionType", "ReactionWrite",
    "Subscriber", "SubscriberStatus",
]
