# src/blogpress/api/v1/endpoints/admin.py
"""Moderator endpoints. Every route requires an admin bearer token."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from blogpress.api.v1.dependencies import (
    BlogLifecycleDep,
    CommentModerationDep,
    CurrentAdminDep,
    SubscriptionManagerDep,
    get_current_admin,
)
from blogpress.core.settings import settings
from blogpress.schemas.admin import RejectRequest
from blogpress.schemas.comment import CommentResponse
from blogpress.schemas.common import MessageResponse, PageResponse
from blogpress.schemas.post import AdminPostDetail, PostEditRequest
from blogpress.schemas.subscriber import SubscriberResponse

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
)

PageQuery = Annotated[int, Query(ge=0)]
SizeQuery = Annotated[int, Query(ge=1, le=settings.max_page_size)]


@router.get("/blogs", response_model=PageResponse[AdminPostDetail])
def list_blogs(
    lifecycle: BlogLifecycleDep,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    page: PageQuery = 0,
    size: SizeQuery = settings.default_page_size,
) -> PageResponse[AdminPostDetail]:
    result = lifecycle.list_admin(status_filter, page, size)
    return PageResponse[AdminPostDetail].from_page(result, AdminPostDetail.model_validate)


@router.get("/blogs/{post_id}", response_model=AdminPostDetail)
def get_blog(post_id: str, lifecycle: BlogLifecycleDep) -> AdminPostDetail:
    return AdminPostDetail.model_validate(lifecycle.get(post_id))


@router.patch("/blogs/{post_id}", response_model=AdminPostDetail)
def edit_blog(
    post_id: str,
    payload: PostEditRequest,
    lifecycle: BlogLifecycleDep,
) -> AdminPostDetail:
    """Edit content fields; the slug is never changed."""
    return AdminPostDetail.model_validate(lifecycle.edit(post_id, payload))


@router.delete("/blogs/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blog(post_id: str, lifecycle: BlogLifecycleDep) -> Response:
    lifecycle.delete(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/blogs/{post_id}/approve", response_model=AdminPostDetail)
def approve_blog(
    post_id: str,
    lifecycle: BlogLifecycleDep,
    admin_id: CurrentAdminDep,
) -> AdminPostDetail:
    """Publish a pending blog and notify its author."""
    return AdminPostDetail.model_validate(lifecycle.approve(post_id, admin_id))


@router.post("/blogs/{post_id}/reject", response_model=AdminPostDetail)
def reject_blog(
    post_id: str,
    payload: RejectRequest,
    lifecycle: BlogLifecycleDep,
) -> AdminPostDetail:
    """Reject a pending blog and tell the author why."""
    return AdminPostDetail.model_validate(lifecycle.reject(post_id, payload.reason))


@router.get("/subscribers", response_model=PageResponse[SubscriberResponse])
def list_subscribers(
    manager: SubscriptionManagerDep,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    page: PageQuery = 0,
    size: SizeQuery = settings.default_page_size,
) -> PageResponse[SubscriberResponse]:
    result = manager.list_all(status_filter, page, size)
    return PageResponse[SubscriberResponse].from_page(result, SubscriberResponse.model_validate)


@router.get("/comments/pending", response_model=PageResponse[CommentResponse])
def list_pending_comments(
    comments: CommentModerationDep,
    page: PageQuery = 0,
    size: SizeQuery = settings.default_page_size,
) -> PageResponse[CommentResponse]:
    result = comments.list_pending(page, size)
    return PageResponse[CommentResponse].from_page(result, CommentResponse.model_validate)


@router.post("/comments/{comment_id}/hide", response_model=MessageResponse)
def hide_comment(comment_id: str, comments: CommentModerationDep) -> MessageResponse:
    comments.hide(comment_id)
    return MessageResponse(message="Comment hidden.")


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: str, comments: CommentModerationDep) -> Response:
    comments.delete(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
