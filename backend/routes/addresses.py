"""
Shipping address endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import get_current_user
from domain.responses import success_response
from models import AddressRequest
from services import address_service
from utils.serializers import address_dict

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.get("")
async def list_addresses(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    addresses = await address_service.list_addresses(db, user_id=user.id)
    return success_response(
        data=[address_dict(a) for a in addresses],
        meta={"total": len(addresses)},
    )


@router.get("/{address_id}")
async def get_address(
    address_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await address_service.get_address(db, address_id=address_id, user_id=user.id)
    return success_response(data=address_dict(address))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_address(
    request: AddressRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await address_service.create_address(
        db,
        user_id=user.id,
        street=request.street,
        number=request.number,
        complement=request.complement,
        neighborhood=request.neighborhood,
        city=request.city,
        state=request.state,
        zip_code=request.zip_code,
        is_default=request.is_default,
    )
    await db.commit()
    return success_response(data=address_dict(address))


@router.put("/{address_id}")
async def update_address(
    address_id: int,
    request: AddressRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await address_service.update_address(
        db,
        address_id=address_id,
        user_id=user.id,
        street=request.street,
        number=request.number,
        complement=request.complement,
        neighborhood=request.neighborhood,
        city=request.city,
        state=request.state,
        zip_code=request.zip_code,
        is_default=request.is_default,
    )
    await db.commit()
    return success_response(data=address_dict(address))


@router.delete("/{address_id}")
async def delete_address(
    address_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await address_service.delete_address(db, address_id=address_id, user_id=user.id)
    await db.commit()
    return success_response(data={"id": address_id, "deleted": True})


@router.patch("/{address_id}/set-default")
async def set_default_address(
    address_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await address_service.set_default_address(db, address_id=address_id, user_id=user.id)
    await db.commit()
    return success_response(data=address_dict(address))
