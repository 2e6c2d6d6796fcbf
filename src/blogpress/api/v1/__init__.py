# src/blogpress/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    blogs_router,
    comments_router,
    reactions_router,
    submission_router,
    subscribers_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "blogs_router",
    "comments_router",
    "reactions_router",
    "submission_router",
    "subscribers_router",
]
