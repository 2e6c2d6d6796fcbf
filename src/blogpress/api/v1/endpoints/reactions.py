# src/blogpress/api/v1/endpoints/reactions.py
"""Like/dislike endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from blogpress.api.v1.dependencies import ClientIpDep, ReactionToggleDep
from blogpress.schemas.reaction import ReactionRequest, ReactionResponse
from blogpress.services.reactions import ReactionResult

router = APIRouter(prefix="/blogs/{post_id}/reaction", tags=["reactions"])


def _to_response(result: ReactionResult) -> ReactionResponse:
    return ReactionResponse(
        post_id=result.post_id,
        likes_count=result.likes_count,
        dislikes_count=result.dislikes_count,
        user_reaction=result.user_reaction,
        action=result.action.value if result.action else None,
    )


@router.get("", response_model=ReactionResponse)
def reaction_status(
    post_id: str,
    reactions: ReactionToggleDep,
    visitor_id: str | None = None,
) -> ReactionResponse:
    return _to_response(reactions.status(post_id, visitor_id))


@router.post("", response_model=ReactionResponse)
def toggle_reaction(
    post_id: str,
    payload: ReactionRequest,
    reactions: ReactionToggleDep,
    ip_address: ClientIpDep,
) -> ReactionResponse:
    """Add, remove or switch the caller's reaction."""
    result = reactions.toggle(post_id, payload.visitor_id, payload.reaction_type, ip_address)
    return _to_response(result)
