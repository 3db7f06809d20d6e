"""
API dependency helpers.

Bearer-token authentication and the role guard used by protected routes.
"""
import logging
import uuid
from typing import Callable, Iterable, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from catalog.db import models
from catalog.db.database import get_db
from catalog.db.repositories import users as user_repo
from catalog.utils.jwt_tokens import InvalidTokenError, TokenPayload, decode_access_token

logger = logging.getLogger(__name__)

# Contract:
# get_current_payload -> TokenPayload for any valid bearer token (401 otherwise)
# require_roles(...) -> TokenPayload when the stored user's role is allowed (401/403 otherwise)


def _bearer_token(authorization: Optional[str]) -> str:
    parts = (authorization or "").split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1].strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    return parts[1].strip()


def _decode(token: str) -> TokenPayload:
    try:
        return decode_access_token(token)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def payload_user_id(payload: TokenPayload) -> uuid.UUID:
    try:
        return uuid.UUID(str(payload.id))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_current_payload(
    authorization: Optional[str] = Header(default=None),
) -> TokenPayload:
    return _decode(_bearer_token(authorization))


def require_roles(*roles: models.UserType) -> Callable[..., TokenPayload]:
    """Build a dependency admitting only users whose stored role is in ``roles``.

    The role is always read from the database so a demoted user loses access
    immediately, whatever their token says.
    """
    allowed: Iterable[models.UserType] = frozenset(roles)

    def _role_guard(
        authorization: Optional[str] = Header(default=None),
        db: Session = Depends(get_db),
    ) -> TokenPayload:
        if not allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        payload = _decode(_bearer_token(authorization))
        user = user_repo.get_by_id(db, user_id=payload_user_id(payload))
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        if user.user_type not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return payload

    return _role_guard


require_admin = require_roles(models.UserType.ADMIN)
require_member = require_roles(models.UserType.ADMIN, models.UserType.NORMAL_USER)
