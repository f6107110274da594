"""
Address service — shipping addresses and default-address bookkeeping.

Invariant: whenever a user has at least one address, exactly one of them has
is_default=True.
    - the first address is always the default
    - marking an address as default clears the previous default
    - deleting the default promotes the oldest remaining address
    - clearing the flag on the current default is ignored; the default moves
      only when another address is marked
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Address, Order
from domain.errors import BusinessRuleError, NotFoundError
from services import user_service
from utils.validators import format_zip_code, normalize_state

logger = logging.getLogger(__name__)


async def list_addresses(db: AsyncSession, *, user_id: int) -> list[Address]:
    res = await db.execute(
        select(Address).where(Address.user_id == user_id).order_by(Address.id)
    )
    return list(res.scalars().all())


async def get_address(db: AsyncSession, *, address_id: int, user_id: int) -> Address:
    res = await db.execute(
        select(Address).where(Address.id == address_id, Address.user_id == user_id)
    )
    address = res.scalar_one_or_none()
    if not address:
        raise NotFoundError("Address", str(address_id))
    return address


async def _unset_default(db: AsyncSession, user_id: int) -> None:
    for address in await list_addresses(db, user_id=user_id):
        if address.is_default:
            address.is_default = False


async def create_address(
    db: AsyncSession,
    *,
    user_id: int,
    street: str,
    number: str,
    complement: str | None,
    neighborhood: str,
    city: str,
    state: str,
    zip_code: str,
    is_default: bool = False,
) -> Address:
    await user_service.require_user(db, user_id)

    state = normalize_state(state)
    zip_code = format_zip_code(zip_code)

    existing = await list_addresses(db, user_id=user_id)
    if not existing:
        is_default = True
    elif is_default:
        await _unset_default(db, user_id)

    address = Address(
        user_id=user_id,
        street=street,
        number=number,
        complement=complement,
        neighborhood=neighborhood,
        city=city,
        state=state,
        zip_code=zip_code,
        is_default=is_default,
    )
    db.add(address)
    await db.flush()
    return address


async def update_address(
    db: AsyncSession,
    *,
    address_id: int,
    user_id: int,
    street: str,
    number: str,
    complement: str | None,
    neighborhood: str,
    city: str,
    state: str,
    zip_code: str,
    is_default: bool = False,
) -> Address:
    address = await get_address(db, address_id=address_id, user_id=user_id)

    state = normalize_state(state)
    zip_code = format_zip_code(zip_code)

    if is_default and not address.is_default:
        await _unset_default(db, user_id)
        address.is_default = True

    address.street = street
    address.number = number
    address.complement = complement
    address.neighborhood = neighborhood
    address.city = city
    address.state = state
    address.zip_code = zip_code
    await db.flush()
    return address


async def delete_address(db: AsyncSession, *, address_id: int, user_id: int) -> None:
    address = await get_address(db, address_id=address_id, user_id=user_id)

    res = await db.execute(
        select(Order.id).where(Order.shipping_address_id == address.id).limit(1)
    )
    if res.scalar_one_or_none() is not None:
        raise BusinessRuleError("Cannot delete an address used by an order")

    was_default = address.is_default
    await db.delete(address)
    await db.flush()

    if was_default:
        remaining = await list_addresses(db, user_id=user_id)
        if remaining:
            remaining[0].is_default = True
            await db.flush()
            logger.info(f"Address {remaining[0].id} promoted to default for user {user_id}")


async def set_default_address(db: AsyncSession, *, address_id: int, user_id: int) -> Address:
    address = await get_address(db, address_id=address_id, user_id=user_id)
    await _unset_default(db, user_id)
    address.is_default = True
    await db.flush()
    return address
