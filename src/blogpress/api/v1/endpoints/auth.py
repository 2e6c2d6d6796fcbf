# src/blogpress/api/v1/endpoints/auth.py
"""Moderator authentication endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from blogpress.core.security import authenticate_admin, create_access_token
from blogpress.schemas.admin import AdminTokenRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/admin/token", response_model=TokenResponse)
async def issue_admin_token(request: AdminTokenRequest) -> TokenResponse:
    """Exchange moderator credentials for a bearer token."""
    if not authenticate_admin(request.username, request.password):
        logger.warning("Failed admin login for %s", request.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return TokenResponse(access_token=create_access_token(request.username))
