"""Verification of the access tokens issued by the hosted auth service."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from agrom.config import settings


def decode_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except jwt.PyJWTError as e:
        raise ValueError(str(e)) from e


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign a token the same way the hosted auth does. Used for local sessions and tests."""
    to_encode = dict(data)
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire, "aud": settings.SUPABASE_JWT_AUDIENCE, "role": "authenticated"})
    return jwt.encode(to_encode, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
