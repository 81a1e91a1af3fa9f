"""
Password hashing and bearer tokens.

Tokens are HS256 JWTs whose `sub` claim is the user id. The same token is
accepted from the `Authorization` header or from the `access_token` cookie,
where it is stored with a "Bearer " prefix.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import UUID

from jose import jwt
from passlib.context import CryptContext

SECRET_KEY = os.environ.get("BLOG_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

TOKEN_COOKIE = "access_token"
BEARER_PREFIX = "Bearer "

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


# --- Passwords ---


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # Seeded accounts may have no password at all
    if not hashed_password:
        return False
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


# --- Tokens ---


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    to_encode["exp"] = current_time + (expires_delta or timedelta(minutes=15))
    encoded_jwt: str = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def create_user_token(user_id: UUID, now_utc: datetime | None = None) -> str:
    """Session token for a signed-in user."""
    return create_access_token(
        {"sub": str(user_id)},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        now_utc=now_utc,
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except jwt.JWTError:
        return None


def user_id_from_token(token: str) -> UUID | None:
    """The user id in a valid token, or None for bad signatures and subjects."""
    payload = decode_access_token(token)
    if not payload:
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str):
        return None
    try:
        return UUID(subject)
    except ValueError:
        return None


# --- Cookie form ---


def cookie_value(token: str) -> str:
    return f"{BEARER_PREFIX}{token}"


def token_from_cookie(value: str | None) -> str | None:
    if value and value.startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX) :]
    return None
