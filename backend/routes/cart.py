"""
Cart endpoints — the authenticated caller's cart.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import get_current_user
from domain.responses import success_response
from models import AddToCartRequest, UpdateCartItemRequest
from services import cart_service
from utils.serializers import cart_dict

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def get_cart(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.get_or_create_cart(db, user.id)
    await db.commit()
    return success_response(data=cart_dict(cart))


@router.post("/items")
async def add_item(
    request: AddToCartRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.add_to_cart(
        db, user_id=user.id, product_id=request.product_id, quantity=request.quantity
    )
    await db.commit()
    return success_response(data=cart_dict(cart))


@router.put("/items/{item_id}")
async def update_item(
    item_id: int,
    request: UpdateCartItemRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.update_cart_item(
        db, user_id=user.id, item_id=item_id, quantity=request.quantity
    )
    await db.commit()
    return success_response(data=cart_dict(cart))


@router.delete("/items/{item_id}")
async def remove_item(
    item_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.remove_cart_item(db, user_id=user.id, item_id=item_id)
    await db.commit()
    return success_response(data=cart_dict(cart))


@router.delete("")
async def clear_cart(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.clear_cart(db, user_id=user.id)
    await db.commit()
    return success_response(data=cart_dict(cart))
