"""
Seed the configured database with demo data.

Creates an admin, a customer with a default address, two categories and a
handful of products. Safe to re-run: existing rows (matched by email, name or
SKU) are left untouched.

Run from the backend/ directory:
    python scripts/seed_demo.py
"""
import asyncio
import os
import sys

# Add backend/ to path so we can import config
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from database import async_session, init_db
from db_models import Category, Product, User
from domain.enums import Role
from services import address_service, catalog_service, user_service

USERS = [
    {"name": "Store Admin", "email": "admin@storefront.local", "role": Role.ADMIN},
    {"name": "Demo Customer", "email": "customer@storefront.local", "role": Role.CUSTOMER},
]

CATALOG = {
    "Electronics": [
        ("Wireless Mouse", "ELEC-MOUSE-01", 49.90, 50),
        ("Mechanical Keyboard", "ELEC-KEYB-01", 199.99, 20),
        ("27\" Monitor", "ELEC-MON-27", 1299.00, 8),
    ],
    "Books": [
        ("Dune", "BOOK-DUNE", 59.90, 30),
        ("Foundation", "BOOK-FOUND", 49.90, 25),
    ],
}


async def _ensure_user(db, name: str, email: str, role: Role) -> User:
    res = await db.execute(select(User).where(User.email == email))
    user = res.scalar_one_or_none()
    if user:
        return user
    return await user_service.create_user(db, name=name, email=email, role=role)


async def seed():
    os.makedirs("data", exist_ok=True)
    await init_db()

    async with async_session() as db:
        users = [await _ensure_user(db, **u) for u in USERS]
        customer = users[1]

        if not await address_service.list_addresses(db, user_id=customer.id):
            await address_service.create_address(
                db,
                user_id=customer.id,
                street="Av. Paulista",
                number="1578",
                complement=None,
                neighborhood="Bela Vista",
                city="São Paulo",
                state="SP",
                zip_code="01310-200",
            )

        for category_name, products in CATALOG.items():
            res = await db.execute(select(Category).where(Category.name == category_name))
            category = res.scalar_one_or_none()
            if not category:
                category = await catalog_service.create_category(db, name=category_name, description=None)

            for name, sku, price, stock in products:
                res = await db.execute(select(Product.id).where(Product.sku == sku))
                if res.scalar_one_or_none() is not None:
                    continue
                await catalog_service.create_product(
                    db,
                    name=name,
                    description=None,
                    price=price,
                    stock_quantity=stock,
                    image_url=None,
                    sku=sku,
                    category_id=category.id,
                )

        await db.commit()

    print("Seed complete.")
    for user in users:
        print(f"  {user.role:<8} id={user.id}  {user.email}  (X-User-Id: {user.id})")


if __name__ == "__main__":
    asyncio.run(seed())
