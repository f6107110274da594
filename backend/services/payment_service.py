"""
Payment service — simulated gateway, one payment per order.

Order status follows payment status:
    APPROVED  → order PAID
    REJECTED  → order stays PENDING
    REFUNDED  → order CANCELLED (stock is not restored on refund)

A payment row is stored for rejected attempts too, and an order that already
has a payment cannot be paid again.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db_models import Payment
from domain.constants import TRANSACTION_ID_PREFIX, TRANSACTION_ID_HEX_LENGTH
from domain.enums import OrderStatus, PaymentMethod, PaymentStatus
from domain.errors import BusinessRuleError, NotFoundError
from services import order_service
from utils.validators import card_number_digits

logger = logging.getLogger(__name__)

CARD_METHODS = frozenset({PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD})

# Swapped out in tests for a seeded or stubbed generator
_rng = random.Random()


def generate_transaction_id() -> str:
    return TRANSACTION_ID_PREFIX + uuid.uuid4().hex[:TRANSACTION_ID_HEX_LENGTH].upper()


async def simulate_payment_processing(
    payment_method: PaymentMethod,
    card_number: str | None = None,
) -> bool:
    """
    Stand-in for a real gateway call.

    Card payments without a full card number are rejected outright; everything
    else is approved with probability `settings.payment_approval_rate`.
    """
    if settings.payment_processing_delay_seconds > 0:
        await asyncio.sleep(settings.payment_processing_delay_seconds)

    if PaymentMethod(payment_method) in CARD_METHODS:
        if len(card_number_digits(card_number)) < settings.min_card_number_length:
            return False

    return _rng.random() < settings.payment_approval_rate


async def find_order_payment(db: AsyncSession, order_id: int) -> Payment | None:
    res = await db.execute(select(Payment).where(Payment.order_id == order_id))
    return res.scalar_one_or_none()


async def process_payment(
    db: AsyncSession,
    *,
    user_id: int,
    order_id: int,
    payment_method: PaymentMethod,
    card_number: str | None = None,
) -> Payment:
    order = await order_service.get_owned_order(db, order_id=order_id, user_id=user_id)

    if await find_order_payment(db, order.id) is not None:
        raise BusinessRuleError("Order already has a processed payment")

    if order.status != OrderStatus.PENDING:
        raise BusinessRuleError(
            "Only pending orders can receive a payment",
            details={"status": order.status},
        )

    payment = Payment(
        order=order,
        payment_method=PaymentMethod(payment_method).value,
        status=PaymentStatus.PENDING.value,
        transaction_id=generate_transaction_id(),
    )

    approved = await simulate_payment_processing(payment_method, card_number)
    if approved:
        now = datetime.utcnow()
        payment.status = PaymentStatus.APPROVED.value
        payment.paid_at = now
        order.status = OrderStatus.PAID.value
        order.updated_at = now
        logger.info(f"Payment {payment.transaction_id} APPROVED for order {order.order_number}")
    else:
        payment.status = PaymentStatus.REJECTED.value
        logger.warning(f"Payment {payment.transaction_id} REJECTED for order {order.order_number}")

    db.add(payment)
    await db.flush()
    return payment


async def get_order_payment(db: AsyncSession, *, order_id: int, user_id: int) -> Payment:
    order = await order_service.get_owned_order(db, order_id=order_id, user_id=user_id)
    payment = await find_order_payment(db, order.id)
    if not payment:
        raise NotFoundError("Payment for order", str(order_id))
    return payment


async def refund_payment(db: AsyncSession, *, order_id: int, user_id: int) -> Payment:
    order = await order_service.get_owned_order(db, order_id=order_id, user_id=user_id)
    payment = await find_order_payment(db, order.id)
    if not payment:
        raise NotFoundError("Payment for order", str(order_id))

    if payment.status != PaymentStatus.APPROVED:
        raise BusinessRuleError(
            "Only approved payments can be refunded",
            details={"payment_status": payment.status},
        )
    if order.status == OrderStatus.DELIVERED:
        raise BusinessRuleError("Cannot refund an order that has been delivered")

    payment.status = PaymentStatus.REFUNDED.value
    order.status = OrderStatus.CANCELLED.value
    order.updated_at = datetime.utcnow()
    await db.flush()

    logger.info(f"Payment {payment.transaction_id} REFUNDED; order {order.order_number} cancelled")
    return payment
