"""
Access token issuing and decoding (HS256 JWT via python-jose).

The payload carries the user id and email only; roles are always re-read
from the database by the route guards.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt


class InvalidTokenError(Exception):
    """Raised when a token cannot be decoded, is expired, or lacks claims."""


@dataclass(frozen=True)
class TokenPayload:
    id: str
    email: str
    iat: Optional[int] = None
    exp: Optional[int] = None


def _secret() -> str:
    return os.getenv("JWT_SECRET", "dev-secret-change-me")


def _algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def _expires_minutes() -> int:
    try:
        return int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))
    except ValueError:
        return 1440


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=_expires_minutes()))
    claims: Dict[str, Any] = {
        "id": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, _secret(), algorithm=_algorithm())


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a token; expired signatures are rejected by jose."""
    try:
        claims = jwt.decode(token, _secret(), algorithms=[_algorithm()])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    user_id = claims.get("id")
    email = claims.get("email")
    if not user_id or not email:
        raise InvalidTokenError("Token payload is missing required claims")
    return TokenPayload(id=str(user_id), email=str(email), iat=claims.get("iat"), exp=claims.get("exp"))
