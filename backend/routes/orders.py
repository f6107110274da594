"""
Order endpoints — checkout, history, cancellation and admin status updates.
"""

import logging
from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import Pagination, get_current_user, pagination_params, require_admin
from domain.enums import OrderStatus
from domain.responses import success_response, paginated_response
from models import CreateOrderRequest
from services import order_service
from utils.serializers import order_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", status_code=http_status.HTTP_201_CREATED)
async def create_order(
    request: CreateOrderRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await order_service.create_order(
        db, user_id=user.id, shipping_address_id=request.shipping_address_id
    )
    await db.commit()
    return success_response(data=order_dict(order))


@router.get("")
async def list_my_orders(
    page: Pagination = Depends(pagination_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    orders, total = await order_service.list_user_orders(
        db, user_id=user.id, limit=page["limit"], offset=page["offset"]
    )
    return paginated_response(
        [order_dict(o) for o in orders],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.get("/admin/all", dependencies=[Depends(require_admin)])
async def list_all_orders(
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    orders, total = await order_service.list_all_orders(
        db, limit=page["limit"], offset=page["offset"]
    )
    return paginated_response(
        [order_dict(o) for o in orders],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await order_service.get_user_order(db, order_id=order_id, user_id=user.id)
    return success_response(data=order_dict(order))


@router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await order_service.cancel_order(db, order_id=order_id, user_id=user.id)
    await db.commit()
    return success_response(data=order_dict(order))


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    status: OrderStatus = Query(..., description="New order status"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    order = await order_service.update_order_status(db, order_id=order_id, new_status=status)
    await db.commit()
    logger.info(f"Admin {admin.id} set order {order.order_number} to {order.status}")
    return success_response(data=order_dict(order))
