"""
Cart service — one mutable cart per user.

Stock is only checked here, never reserved: the authoritative reservation
happens at checkout (order_service.create_order).
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Cart, CartItem
from domain.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from services import catalog_service, user_service

logger = logging.getLogger(__name__)


async def get_or_create_cart(db: AsyncSession, user_id: int) -> Cart:
    res = await db.execute(select(Cart).where(Cart.user_id == user_id))
    cart = res.scalar_one_or_none()
    if cart:
        return cart

    await user_service.require_user(db, user_id)
    cart = Cart(user_id=user_id, items=[])
    db.add(cart)
    await db.flush()
    return cart


def _ensure_stock(product, quantity: int) -> None:
    if product.stock_quantity < quantity:
        raise BusinessRuleError(
            f"Insufficient stock. Available: {product.stock_quantity}",
            details={"product_id": product.id, "available": product.stock_quantity, "requested": quantity},
        )


async def add_to_cart(db: AsyncSession, *, user_id: int, product_id: int, quantity: int) -> Cart:
    """
    Add `quantity` units of a product, merging with an existing line.

    The stock check is repeated against the merged quantity.
    """
    if quantity <= 0:
        raise BusinessRuleError("Quantity must be positive")

    cart = await get_or_create_cart(db, user_id)
    product = await catalog_service.get_product(db, product_id)

    if not product.active:
        raise BusinessRuleError(f"Product {product.name} is not available")
    _ensure_stock(product, quantity)

    existing = next((i for i in cart.items if i.product_id == product.id), None)
    if existing:
        new_quantity = existing.quantity + quantity
        _ensure_stock(product, new_quantity)
        existing.quantity = new_quantity
    else:
        cart.items.append(CartItem(product=product, quantity=quantity))

    cart.updated_at = datetime.utcnow()
    await db.flush()
    return cart


def _find_own_item(cart: Cart, item: CartItem | None, item_id: int) -> CartItem:
    if item is None:
        raise NotFoundError("Cart item", str(item_id))
    if item.cart_id != cart.id:
        raise PermissionDeniedError("Cart item does not belong to your cart")
    return item


async def update_cart_item(db: AsyncSession, *, user_id: int, item_id: int, quantity: int) -> Cart:
    if quantity <= 0:
        raise BusinessRuleError("Quantity must be positive")

    cart = await get_or_create_cart(db, user_id)
    item = _find_own_item(cart, await db.get(CartItem, item_id), item_id)
    _ensure_stock(item.product, quantity)

    item.quantity = quantity
    cart.updated_at = datetime.utcnow()
    await db.flush()
    return cart


async def remove_cart_item(db: AsyncSession, *, user_id: int, item_id: int) -> Cart:
    cart = await get_or_create_cart(db, user_id)
    item = _find_own_item(cart, await db.get(CartItem, item_id), item_id)

    cart.items.remove(item)
    cart.updated_at = datetime.utcnow()
    await db.flush()
    return cart


async def clear_cart(db: AsyncSession, *, user_id: int) -> Cart:
    cart = await get_or_create_cart(db, user_id)
    cart.items.clear()
    cart.updated_at = datetime.utcnow()
    await db.flush()
    return cart
