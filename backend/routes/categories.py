"""
Category endpoints — public listing, admin management.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import require_admin
from domain.responses import success_response
from models import CategoryRequest
from services import catalog_service
from utils.serializers import category_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("")
async def list_categories(db: AsyncSession = Depends(get_db)):
    rows = await catalog_service.list_categories(db)
    return success_response(
        data=[category_dict(c, product_count=n) for c, n in rows],
        meta={"total": len(rows)},
    )


@router.get("/{category_id}")
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await catalog_service.get_category(db, category_id)
    count = await catalog_service.count_category_products(db, category_id)
    return success_response(data=category_dict(category, product_count=count))


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_category(request: CategoryRequest, db: AsyncSession = Depends(get_db)):
    category = await catalog_service.create_category(
        db, name=request.name, description=request.description
    )
    await db.commit()
    logger.info(f"Category created: id={category.id} name={category.name}")
    return success_response(data=category_dict(category, product_count=0))


@router.put("/{category_id}", dependencies=[Depends(require_admin)])
async def update_category(
    category_id: int,
    request: CategoryRequest,
    db: AsyncSession = Depends(get_db),
):
    category = await catalog_service.update_category(
        db,
        category_id=category_id,
        name=request.name,
        description=request.description,
    )
    await db.commit()
    return success_response(data=category_dict(category))


@router.delete("/{category_id}", dependencies=[Depends(require_admin)])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    await catalog_service.delete_category(db, category_id=category_id)
    await db.commit()
    return success_response(data={"id": category_id, "deleted": True})
