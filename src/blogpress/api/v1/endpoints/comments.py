# src/blogpress/api/v1/endpoints/comments.py
"""Reader comment endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from blogpress.api.v1.dependencies import ClientIpDep, CommentModerationDep
from blogpress.core.settings import settings
from blogpress.schemas.comment import CommentCreate, CommentResponse
from blogpress.schemas.common import PageResponse

router = APIRouter(prefix="/blogs/{post_id}/comments", tags=["comments"])


@router.get("", response_model=PageResponse[CommentResponse])
def list_comments(
    post_id: str,
    comments: CommentModerationDep,
    page: Annotated[int, Query(ge=0)] = 0,
    size: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> PageResponse[CommentResponse]:
    result = comments.list_visible(post_id, page, size)
    return PageResponse[CommentResponse].from_page(result, CommentResponse.model_validate)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: str,
    payload: CommentCreate,
    comments: CommentModerationDep,
    ip_address: ClientIpDep,
) -> CommentResponse:
    comment = comments.add(post_id, payload, ip_address)
    return CommentResponse.model_validate(comment)
