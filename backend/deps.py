"""
Shared FastAPI dependencies.

Routers import the DB session, auth guards and pagination from here.
"""

from __future__ import annotations

from typing import TypedDict

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from domain.enums import Role
from domain.errors import PermissionDeniedError, UnauthorizedError
from middleware.auth import require_authenticated_user_id
from services import user_service


class Pagination(TypedDict):
    limit: int
    offset: int


def pagination_params(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0, le=100_000),
) -> Pagination:
    return {"limit": limit, "offset": offset}


async def get_current_user(
    user_id: int = Depends(require_authenticated_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated caller to a User row (401 if unknown)."""
    user = await user_service.get_user(db, user_id)
    if not user:
        raise UnauthorizedError("Unknown user.")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN.value:
        raise PermissionDeniedError("Admin role required for this endpoint.")
    return user
