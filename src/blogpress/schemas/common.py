"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from blogpress.repositories.pagination import Page

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """Offset-paginated list returned by collection endpoints."""

    items: list[T]
    page: int = Field(..., ge=0, description="Zero-based page index.")
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def from_page(cls, page: Page[Any], convert: Callable[[Any], T]) -> PageResponse[T]:
        """Build a response from a repository page, converting each item."""
        return cls(
            items=[convert(item) for item in page.items],
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.first,
            last=page.last,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
