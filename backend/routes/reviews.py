"""
Product review endpoints.

The caller's own review is addressed through the product
(one review per user per product).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import Pagination, get_current_user, pagination_params
from domain.responses import success_response, paginated_response
from models import ReviewRequest
from services import review_service
from utils.serializers import review_dict

router = APIRouter(prefix="/api/products/{product_id}/reviews", tags=["reviews"])


@router.get("")
async def list_reviews(
    product_id: int,
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    reviews, total = await review_service.list_product_reviews(
        db, product_id=product_id, limit=page["limit"], offset=page["offset"]
    )
    return paginated_response(
        [review_dict(r) for r in reviews],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.get("/rating")
async def get_rating(product_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=await review_service.get_product_rating(db, product_id=product_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    product_id: int,
    request: ReviewRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await review_service.create_review(
        db,
        product_id=product_id,
        user_id=user.id,
        rating=request.rating,
        comment=request.comment,
    )
    await db.commit()
    return success_response(data=review_dict(review))


@router.put("")
async def update_review(
    product_id: int,
    request: ReviewRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await review_service.update_review(
        db,
        product_id=product_id,
        user_id=user.id,
        rating=request.rating,
        comment=request.comment,
    )
    await db.commit()
    return success_response(data=review_dict(review))


@router.delete("")
async def delete_review(
    product_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await review_service.delete_review(db, product_id=product_id, user_id=user.id)
    await db.commit()
    return success_response(data={"product_id": product_id, "deleted": True})
