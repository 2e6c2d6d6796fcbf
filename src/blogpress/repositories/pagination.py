"""Offset pagination over SQLAlchemy queries."""
from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Query

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["Page", "paginate"]


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the totals needed to render navigation."""

    items: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def first(self) -> bool:
        return self.page == 0

    @property
    def last(self) -> bool:
        return self.page >= self.total_pages - 1

    def map(self, fn: Callable[[T], U]) -> Page[U]:
        """Return a page with every item transformed by ``fn``."""
        return Page(
            items=[fn(item) for item in self.items],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
        )


def paginate(query: Query[T], page: int, size: int) -> Page[T]:
    """Apply offset/limit to an ordered query and count the unpaged total.

    Args:
        query: Filtered and ordered legacy ``Query``.
        page: Zero-based page index.
        size: Page size; must be positive.
    """
    page = max(page, 0)
    size = max(size, 1)
    count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
    total = query.session.execute(count_stmt).scalar_one()
    items = query.offset(page * size).limit(size).all()
    return Page(items=list(items), page=page, size=size, total_elements=int(total))
