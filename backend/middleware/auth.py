"""
Caller authentication helpers.

Preferred:
  - Authorization: Bearer <jwt>, HS256, issued by the external identity
    service; the `sub` claim carries the user id.

Development / tests:
  - X-User-Id: <id>, accepted only while ALLOW_HEADER_AUTH is enabled
    (refused in production by config.validate_production_settings).

Tokens are only verified here, never issued.
"""
import logging
from fastapi import Header
from typing import Optional

import jwt

from config import settings
from domain.errors import DomainError, UnauthorizedError

logger = logging.getLogger(__name__)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def decode_access_token(token: str) -> dict:
    if not settings.jwt_secret:
        raise DomainError("Server auth misconfigured (JWT secret missing).", status_code=500)
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")


def _parse_user_id(raw: str) -> int:
    try:
        user_id = int(raw)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid user identity.")
    if user_id <= 0:
        raise UnauthorizedError("Invalid user identity.")
    return user_id


async def get_authenticated_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Optional[int]:
    """
    Best-effort authentication:
      - Prefer Authorization Bearer JWT
      - Fall back to X-User-Id when header auth is enabled
    """
    token = _parse_bearer_token(authorization)
    if token:
        payload = decode_access_token(token)
        return _parse_user_id(payload.get("sub"))

    if x_user_id is not None:
        if not settings.allow_header_auth:
            logger.warning("X-User-Id header rejected: header auth disabled")
            return None
        return _parse_user_id(x_user_id)
    return None


async def require_authenticated_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> int:
    user_id = await get_authenticated_user_id(
        authorization=authorization,
        x_user_id=x_user_id,
    )
    if user_id is None:
        raise UnauthorizedError(
            "Authentication required. Provide Authorization: Bearer <token>."
        )
    return user_id
