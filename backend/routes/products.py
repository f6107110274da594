"""
Product endpoints — storefront search and admin catalog management.
"""

import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import Pagination, pagination_params, require_admin
from domain.responses import success_response, paginated_response
from models import ProductCreateRequest, ProductUpdateRequest
from services import catalog_service
from utils.serializers import product_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    category_id: int | None = Query(None),
    search: str | None = Query(None, max_length=100),
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    sort_by: str = Query("id"),
    direction: str = Query("asc"),
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    products, total = await catalog_service.search_products(
        db,
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        direction=direction,
        limit=page["limit"],
        offset=page["offset"],
    )
    return paginated_response(
        [product_dict(p) for p in products],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.get("/{product_id}")
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.get_product(db, product_id)
    return success_response(data=product_dict(product))


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_product(request: ProductCreateRequest, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.create_product(
        db,
        name=request.name,
        description=request.description,
        price=request.price,
        stock_quantity=request.stock_quantity,
        image_url=request.image_url,
        sku=request.sku,
        category_id=request.category_id,
        active=request.active,
    )
    await db.commit()
    return success_response(data=product_dict(product))


@router.put("/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    product = await catalog_service.update_product(
        db,
        product_id=product_id,
        name=request.name,
        description=request.description,
        price=request.price,
        stock_quantity=request.stock_quantity,
        image_url=request.image_url,
        category_id=request.category_id,
        active=request.active,
    )
    await db.commit()
    return success_response(data=product_dict(product))


@router.delete("/{product_id}", dependencies=[Depends(require_admin)])
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await catalog_service.soft_delete_product(db, product_id=product_id)
    await db.commit()
    return success_response(data=product_dict(product))


@router.patch("/{product_id}/stock", dependencies=[Depends(require_admin)])
async def update_stock(
    product_id: int,
    quantity: int = Query(..., description="Signed stock delta"),
    db: AsyncSession = Depends(get_db),
):
    product = await catalog_service.update_stock(db, product_id=product_id, quantity=quantity)
    await db.commit()
    return success_response(data=product_dict(product))
