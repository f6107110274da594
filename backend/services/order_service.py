"""
Order service — checkout, order history, cancellation and admin status updates.

Inventory coupling:
    - checkout decrements Product.stock_quantity by every line's quantity
    - customer cancellation restores it
    - admin status updates and payment refunds never touch stock

Every operation here runs inside the caller's session; the route commits once
the service returns, so a raised error leaves no partial mutation behind.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order, OrderItem
from domain.constants import ORDER_NUMBER_PREFIX, ORDER_NUMBER_HEX_LENGTH
from domain.enums import OrderStatus
from domain.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from domain.order_rules import ensure_cancellable, validate_status_transition
from services import address_service, cart_service, catalog_service, user_service

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    return ORDER_NUMBER_PREFIX + uuid.uuid4().hex[:ORDER_NUMBER_HEX_LENGTH].upper()


async def create_order(db: AsyncSession, *, user_id: int, shipping_address_id: int) -> Order:
    """
    Checkout: convert the user's cart into a PENDING order.

    All lines are validated before any stock is touched, so a single
    unavailable product rejects the whole checkout with no mutation.
    """
    await user_service.require_user(db, user_id)
    cart = await cart_service.get_or_create_cart(db, user_id)
    if not cart.items:
        raise BusinessRuleError("Cart is empty")

    address = await address_service.get_address(db, address_id=shipping_address_id, user_id=user_id)

    for line in cart.items:
        product = line.product
        if not product.active:
            raise BusinessRuleError(f"Product {product.name} is no longer available")
        if product.stock_quantity < line.quantity:
            raise BusinessRuleError(
                f"Insufficient stock for product: {product.name}. Available: {product.stock_quantity}",
                details={
                    "product_id": product.id,
                    "available": product.stock_quantity,
                    "requested": line.quantity,
                },
            )

    for line in cart.items:
        product = line.product
        if not await catalog_service.reserve_stock(db, product_id=product.id, quantity=line.quantity):
            raise BusinessRuleError(
                f"Insufficient stock for product: {product.name}",
                details={"product_id": product.id, "requested": line.quantity},
            )

    items = []
    for line in cart.items:
        product = line.product
        items.append(
            OrderItem(
                product=product,
                quantity=line.quantity,
                price=product.price,
                subtotal=round(product.price * line.quantity, 2),
            )
        )

    order = Order(
        order_number=generate_order_number(),
        user_id=user_id,
        shipping_address=address,
        status=OrderStatus.PENDING.value,
        total_amount=round(sum(i.subtotal for i in items), 2),
        items=items,
        created_at=datetime.utcnow(),
    )
    db.add(order)

    cart.items.clear()
    cart.updated_at = datetime.utcnow()
    await db.flush()

    logger.info(
        f"Checkout: order {order.order_number} user={user_id} "
        f"lines={len(items)} total={order.total_amount}"
    )
    return order


async def list_user_orders(
    db: AsyncSession,
    *,
    user_id: int,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Order], int]:
    total_res = await db.execute(select(func.count(Order.id)).where(Order.user_id == user_id))
    res = await db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(res.scalars().all()), int(total_res.scalar() or 0)


async def list_all_orders(db: AsyncSession, *, limit: int = 10, offset: int = 0) -> tuple[list[Order], int]:
    total_res = await db.execute(select(func.count(Order.id)))
    res = await db.execute(
        select(Order)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(res.scalars().all()), int(total_res.scalar() or 0)


async def get_order(db: AsyncSession, order_id: int) -> Order:
    order = await db.get(Order, order_id)
    if not order:
        raise NotFoundError("Order", str(order_id))
    return order


async def get_owned_order(db: AsyncSession, *, order_id: int, user_id: int) -> Order:
    """Fetch an order and ensure it belongs to `user_id` (403 otherwise)."""
    order = await get_order(db, order_id)
    if order.user_id != user_id:
        raise PermissionDeniedError("Order does not belong to the user")
    return order


async def get_user_order(db: AsyncSession, *, order_id: int, user_id: int) -> Order:
    """Order detail for its owner; other users' orders are reported as missing."""
    res = await db.execute(
        select(Order).where(Order.id == order_id, Order.user_id == user_id)
    )
    order = res.scalar_one_or_none()
    if not order:
        raise NotFoundError("Order", str(order_id))
    return order


async def cancel_order(db: AsyncSession, *, order_id: int, user_id: int) -> Order:
    """Customer cancellation: restores stock for every line."""
    order = await get_owned_order(db, order_id=order_id, user_id=user_id)
    ensure_cancellable(order.status)

    for item in order.items:
        await catalog_service.release_stock(db, product_id=item.product_id, quantity=item.quantity)

    order.status = OrderStatus.CANCELLED.value
    order.updated_at = datetime.utcnow()
    await db.flush()

    logger.info(f"Order {order.order_number} cancelled by user {user_id}; stock restored")
    return order


async def update_order_status(db: AsyncSession, *, order_id: int, new_status: OrderStatus) -> Order:
    """Admin status change, checked against the order status machine."""
    order = await get_order(db, order_id)
    previous = order.status
    validate_status_transition(previous, new_status)

    order.status = OrderStatus(new_status).value
    order.updated_at = datetime.utcnow()
    await db.flush()

    logger.info(f"Order {order.order_number} status {previous} -> {order.status}")
    return order
