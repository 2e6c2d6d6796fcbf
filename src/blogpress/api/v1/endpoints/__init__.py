# src/blogpress/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .blogs import router as blogs_router
from .comments import router as comments_router
from .reactions import router as reactions_router
from .submission import router as submission_router
from .subscribers import router as subscribers_router

__all__ = [
    "admin_router",
    "auth_router",
    "blogs_router",
    "comments_router",
    "reactions_router",
    "submission_router",
    "subscribers_router",
]
