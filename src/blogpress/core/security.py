"""Moderator authentication: credential checks and bearer tokens."""
from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from blogpress.core.settings import Settings, settings

ADMIN_ROLE = "admin"


def authenticate_admin(username: str, password: str, config: Settings = settings) -> bool:
    """Return True when the credentials match the configured moderator account."""
    user_ok = secrets.compare_digest(username.encode("utf-8"), config.admin_username.encode("utf-8"))
    pass_ok = secrets.compare_digest(password.encode("utf-8"), config.admin_password.encode("utf-8"))
    return user_ok and pass_ok


def create_access_token(subject: str, config: Settings = settings) -> str:
    """Issue a signed JWT for ``subject`` carrying the admin role."""
    expire = datetime.now(UTC) + timedelta(minutes=config.access_token_expire_minutes)
    to_encode = {"sub": subject, "role": ADMIN_ROLE, "exp": expire}
    encoded_jwt: str = jwt.encode(to_encode, config.secret_key, algorithm=config.jwt_algorithm)
    return encoded_jwt


def decode_admin_token(token: str, config: Settings = settings) -> str | None:
    """Return the admin subject of a valid token, or None."""
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject or payload.get("role") != ADMIN_ROLE:
        return None
    return str(subject)
