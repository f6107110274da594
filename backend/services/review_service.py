"""
Review service — product reviews from verified buyers.

One review per (user, product). A user may review a product only after one of
their orders containing it has been paid (see REVIEWABLE_STATUSES).
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order, OrderItem, Review
from domain.errors import BusinessRuleError, NotFoundError
from domain.order_rules import REVIEWABLE_STATUSES
from services import catalog_service, user_service

logger = logging.getLogger(__name__)


async def has_purchased(db: AsyncSession, *, user_id: int, product_id: int) -> bool:
    res = await db.execute(
        select(OrderItem.id)
        .join(Order, Order.id == OrderItem.order_id)
        .where(
            Order.user_id == user_id,
            OrderItem.product_id == product_id,
            Order.status.in_([s.value for s in REVIEWABLE_STATUSES]),
        )
        .limit(1)
    )
    return res.scalar_one_or_none() is not None


async def _find_user_review(db: AsyncSession, *, product_id: int, user_id: int) -> Review | None:
    res = await db.execute(
        select(Review).where(Review.product_id == product_id, Review.user_id == user_id)
    )
    return res.scalar_one_or_none()


async def create_review(
    db: AsyncSession,
    *,
    product_id: int,
    user_id: int,
    rating: int,
    comment: str | None,
) -> Review:
    product = await catalog_service.get_product(db, product_id)
    user = await user_service.require_user(db, user_id)

    if await _find_user_review(db, product_id=product_id, user_id=user_id):
        raise BusinessRuleError("You have already reviewed this product")

    if not await has_purchased(db, user_id=user_id, product_id=product_id):
        raise BusinessRuleError("You can only review products you have purchased")

    review = Review(product=product, user=user, rating=rating, comment=comment)
    db.add(review)
    await db.flush()
    logger.info(f"Review {review.id} created: product={product_id} user={user_id} rating={rating}")
    return review


async def list_product_reviews(
    db: AsyncSession,
    *,
    product_id: int,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Review], int]:
    await catalog_service.get_product(db, product_id)

    total_res = await db.execute(
        select(func.count(Review.id)).where(Review.product_id == product_id)
    )
    res = await db.execute(
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(res.scalars().all()), int(total_res.scalar() or 0)


async def get_product_rating(db: AsyncSession, *, product_id: int) -> dict:
    """Average rating (0.0 when unrated) and review count."""
    await catalog_service.get_product(db, product_id)
    res = await db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.product_id == product_id)
    )
    average, count = res.one()
    return {
        "product_id": product_id,
        "average_rating": round(float(average), 2) if average is not None else 0.0,
        "total_reviews": int(count or 0),
    }


async def update_review(
    db: AsyncSession,
    *,
    product_id: int,
    user_id: int,
    rating: int,
    comment: str | None,
) -> Review:
    review = await _find_user_review(db, product_id=product_id, user_id=user_id)
    if not review:
        raise NotFoundError("Review", f"product={product_id}")

    review.rating = rating
    review.comment = comment
    await db.flush()
    return review


async def delete_review(db: AsyncSession, *, product_id: int, user_id: int) -> None:
    review = await _find_user_review(db, product_id=product_id, user_id=user_id)
    if not review:
        raise NotFoundError("Review", f"product={product_id}")
    await db.delete(review)
    await db.flush()
