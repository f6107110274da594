"""
Catalog service — categories and products.

Products are never hard-deleted: order lines keep pointing at them, so
deletion only flips `active` off and hides the product from the storefront.
"""

import logging
from datetime import datetime

from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Category, Product
from domain.errors import BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)

PRODUCT_SORT_FIELDS = {
    "id": Product.id,
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
    "stock_quantity": Product.stock_quantity,
}


# ── Categories ──────────────────────────────────────────────────────

async def list_categories(db: AsyncSession) -> list[tuple[Category, int]]:
    """All categories with the number of products attached to each."""
    res = await db.execute(
        select(Category, func.count(Product.id))
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
    )
    return [(c, int(n)) for c, n in res.all()]


async def count_category_products(db: AsyncSession, category_id: int) -> int:
    res = await db.execute(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    )
    return int(res.scalar() or 0)


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category", str(category_id))
    return category


async def _category_name_taken(db: AsyncSession, name: str) -> bool:
    res = await db.execute(select(Category.id).where(Category.name == name))
    return res.scalar_one_or_none() is not None


async def create_category(db: AsyncSession, *, name: str, description: str | None) -> Category:
    if await _category_name_taken(db, name):
        raise BusinessRuleError(f"A category named '{name}' already exists")

    category = Category(name=name, description=description)
    db.add(category)
    await db.flush()
    return category


async def update_category(
    db: AsyncSession,
    *,
    category_id: int,
    name: str,
    description: str | None,
) -> Category:
    category = await get_category(db, category_id)
    if category.name != name and await _category_name_taken(db, name):
        raise BusinessRuleError(f"A category named '{name}' already exists")

    category.name = name
    category.description = description
    await db.flush()
    return category


async def delete_category(db: AsyncSession, *, category_id: int) -> None:
    category = await get_category(db, category_id)
    if await count_category_products(db, category_id) > 0:
        raise BusinessRuleError("Cannot delete a category that still has products")
    await db.delete(category)
    await db.flush()


# ── Products ────────────────────────────────────────────────────────

async def search_products(
    db: AsyncSession,
    *,
    category_id: int | None = None,
    search: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    sort_by: str = "id",
    direction: str = "asc",
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Product], int]:
    """
    Storefront product search. Only active products are returned.

    Returns:
        (page of products, total matching count)
    """
    conditions = [Product.active == True]
    if category_id is not None:
        conditions.append(Product.category_id == category_id)
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
            )
        )
    if min_price is not None:
        conditions.append(Product.price >= min_price)
    if max_price is not None:
        conditions.append(Product.price <= max_price)

    sort_column = PRODUCT_SORT_FIELDS.get(sort_by)
    if sort_column is None:
        raise BusinessRuleError(
            f"Cannot sort products by '{sort_by}'",
            details={"allowed": sorted(PRODUCT_SORT_FIELDS)},
        )
    order = sort_column.desc() if direction.lower() == "desc" else sort_column.asc()

    total_res = await db.execute(select(func.count(Product.id)).where(*conditions))
    total = int(total_res.scalar() or 0)

    res = await db.execute(
        select(Product)
        .where(*conditions)
        .order_by(order, Product.id)
        .limit(limit)
        .offset(offset)
    )
    return list(res.scalars().all()), total


async def get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product", str(product_id))
    return product


async def create_product(
    db: AsyncSession,
    *,
    name: str,
    description: str | None,
    price: float,
    stock_quantity: int,
    image_url: str | None,
    sku: str,
    category_id: int,
    active: bool = True,
) -> Product:
    res = await db.execute(select(Product.id).where(Product.sku == sku))
    if res.scalar_one_or_none() is not None:
        raise BusinessRuleError(f"A product with SKU '{sku}' already exists")

    category = await get_category(db, category_id)

    product = Product(
        name=name,
        description=description,
        price=round(price, 2),
        stock_quantity=stock_quantity,
        image_url=image_url,
        sku=sku,
        active=active,
        category=category,
    )
    db.add(product)
    await db.flush()
    logger.info(f"Product created: id={product.id} sku={sku} stock={stock_quantity}")
    return product


async def update_product(
    db: AsyncSession,
    *,
    product_id: int,
    name: str,
    description: str | None,
    price: float,
    stock_quantity: int,
    image_url: str | None,
    category_id: int,
    active: bool,
) -> Product:
    """Replace a product's editable fields. The SKU is immutable."""
    product = await get_product(db, product_id)
    category = await get_category(db, category_id)

    product.name = name
    product.description = description
    product.price = round(price, 2)
    product.stock_quantity = stock_quantity
    product.image_url = image_url
    product.active = active
    product.category = category
    product.updated_at = datetime.utcnow()
    await db.flush()
    return product


async def soft_delete_product(db: AsyncSession, *, product_id: int) -> Product:
    """Soft-delete a product by setting active=False."""
    product = await get_product(db, product_id)
    product.active = False
    product.updated_at = datetime.utcnow()
    await db.flush()
    logger.info(f"Product {product_id} deactivated")
    return product


async def reserve_stock(db: AsyncSession, *, product_id: int, quantity: int) -> bool:
    """
    Decrement stock in a single conditional UPDATE.

    Returns False when fewer than `quantity` units remain in the row.
    """
    res = await db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity, updated_at=datetime.utcnow())
    )
    return (res.rowcount or 0) > 0


async def release_stock(db: AsyncSession, *, product_id: int, quantity: int) -> None:
    await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=Product.stock_quantity + quantity, updated_at=datetime.utcnow())
    )


async def update_stock(db: AsyncSession, *, product_id: int, quantity: int) -> Product:
    """
    Adjust stock by a signed delta (restock or manual correction).

    Raises:
        BusinessRuleError if the resulting stock would be negative
    """
    product = await get_product(db, product_id)
    if quantity >= 0:
        await release_stock(db, product_id=product_id, quantity=quantity)
    elif not await reserve_stock(db, product_id=product_id, quantity=-quantity):
        await db.refresh(product)
        raise BusinessRuleError(
            "Insufficient stock",
            details={"available": product.stock_quantity, "requested_change": quantity},
        )
    await db.refresh(product)
    logger.info(f"Stock adjusted: product={product_id} delta={quantity} now={product.stock_quantity}")
    return product
