"""
Payment endpoints — simulated gateway, lookup and refunds.

Processing and refunds are rate limited per caller.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from db_models import User
from deps import get_current_user
from domain.responses import success_response
from middleware.rate_limit import rate_limit
from models import ProcessPaymentRequest
from services import payment_service
from utils.serializers import payment_dict

router = APIRouter(prefix="/api/payments", tags=["payments"])

_payment_rate_limit = rate_limit(
    settings.payment_rate_limit_requests,
    settings.payment_rate_limit_window_seconds,
)


@router.post(
    "/process",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_payment_rate_limit)],
)
async def process_payment(
    request: ProcessPaymentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payment = await payment_service.process_payment(
        db,
        user_id=user.id,
        order_id=request.order_id,
        payment_method=request.payment_method,
        card_number=request.card_number,
    )
    await db.commit()
    return success_response(data=payment_dict(payment))


@router.get("/order/{order_id}")
async def get_order_payment(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payment = await payment_service.get_order_payment(db, order_id=order_id, user_id=user.id)
    return success_response(data=payment_dict(payment))


@router.post("/order/{order_id}/refund", dependencies=[Depends(_payment_rate_limit)])
async def refund_payment(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payment = await payment_service.refund_payment(db, order_id=order_id, user_id=user.id)
    await db.commit()
    return success_response(data=payment_dict(payment))
