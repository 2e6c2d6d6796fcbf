# src/blogpress/api/v1/endpoints/blogs.py
"""Public read endpoints for published blogs."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from blogpress.api.v1.dependencies import BlogLifecycleDep
from blogpress.core.settings import settings
from blogpress.schemas.common import PageResponse
from blogpress.schemas.post import ArchiveYear, PostDetail, PostSummary

router = APIRouter(prefix="/blogs", tags=["blogs"])

PageQuery = Annotated[int, Query(ge=0)]
SizeQuery = Annotated[int, Query(ge=1, le=settings.max_page_size)]


@router.get("", response_model=PageResponse[PostSummary])
def list_blogs(
    lifecycle: BlogLifecycleDep,
    search: str | None = None,
    year: Annotated[int | None, Query(ge=1970, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    sort: str = "recent",
    page: PageQuery = 0,
    size: SizeQuery = settings.default_page_size,
) -> PageResponse[PostSummary]:
    """List published blogs with optional search, archive filter and sort."""
    result = lifecycle.list_published(
        search=search, year=year, month=month, sort=sort, page=page, size=size
    )
    return PageResponse[PostSummary].from_page(result, PostSummary.model_validate)


@router.get("/archive", response_model=list[ArchiveYear])
def archive(lifecycle: BlogLifecycleDep) -> list[ArchiveYear]:
    """Published-post counts by year and month, newest first."""
    return lifecycle.archive_index()


@router.get("/{slug}", response_model=PostDetail)
def get_blog(slug: str, lifecycle: BlogLifecycleDep) -> PostDetail:
    """Return a published blog and count the view."""
    post = lifecycle.get_published_by_slug(slug)
    lifecycle.increment_views(post.id)
    lifecycle.db.refresh(post)
    return PostDetail.model_validate(post)
