"""
User lookup and provisioning.

Accounts are created by the seed script or by an external identity service;
the HTTP API only resolves them.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from domain.enums import Role
from domain.errors import BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def require_user(db: AsyncSession, user_id: int) -> User:
    user = await get_user(db, user_id)
    if not user:
        raise NotFoundError("User", str(user_id))
    return user


async def create_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    role: Role = Role.CUSTOMER,
) -> User:
    email = email.strip().lower()
    res = await db.execute(select(User.id).where(User.email == email))
    if res.scalar_one_or_none() is not None:
        raise BusinessRuleError(f"Email already registered: {email}")

    user = User(name=name, email=email, role=Role(role).value)
    db.add(user)
    await db.flush()
    logger.info(f"User created: id={user.id} role={user.role}")
    return user
