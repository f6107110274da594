"""
Pytest configuration and shared fixtures for Storefront tests.

Provides an in-memory SQLite session per test, an httpx client bound to the
FastAPI app with get_db overridden, and catalog/user/address fixtures built
through the service layer.
"""
import pytest
import pytest_asyncio
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from database import Base, get_db
from domain.enums import Role
from main import app
from middleware.rate_limit import get_limiter

# ── Test Configuration ───────────────────────────────────────────────
# Test-only values for settings that would normally come from .env
settings.jwt_secret = "test-jwt-secret-for-pytest-only"
settings.allow_header_auth = True
settings.payment_processing_delay_seconds = 0


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client against the ASGI app with the in-memory database.

    Overrides get_db dependency to use test DB session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    get_limiter().reset()
    yield
    get_limiter().reset()


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession):
    from services import user_service

    user = await user_service.create_user(db_session, name="Ana Souza", email="ana@example.com")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession):
    from services import user_service

    user = await user_service.create_user(db_session, name="Bruno Lima", email="bruno@example.com")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession):
    from services import user_service

    user = await user_service.create_user(
        db_session, name="Store Admin", email="admin@example.com", role=Role.ADMIN
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def category(db_session: AsyncSession):
    from services import catalog_service

    c = await catalog_service.create_category(db_session, name="Electronics", description="Gadgets")
    await db_session.commit()
    return c


@pytest_asyncio.fixture
async def product(db_session: AsyncSession, category):
    from services import catalog_service

    p = await catalog_service.create_product(
        db_session,
        name="Wireless Mouse",
        description="Ergonomic 2.4GHz mouse",
        price=49.90,
        stock_quantity=10,
        image_url=None,
        sku="MOUSE-001",
        category_id=category.id,
    )
    await db_session.commit()
    return p


@pytest_asyncio.fixture
async def second_product(db_session: AsyncSession, category):
    from services import catalog_service

    p = await catalog_service.create_product(
        db_session,
        name="Mechanical Keyboard",
        description="Blue switches",
        price=199.99,
        stock_quantity=5,
        image_url=None,
        sku="KEYB-001",
        category_id=category.id,
    )
    await db_session.commit()
    return p


@pytest_asyncio.fixture
async def address(db_session: AsyncSession, customer):
    from services import address_service

    a = await address_service.create_address(
        db_session,
        user_id=customer.id,
        street="Av. Paulista",
        number="1000",
        complement="Apto 12",
        neighborhood="Bela Vista",
        city="São Paulo",
        state="sp",
        zip_code="01310100",
    )
    await db_session.commit()
    return a


@pytest_asyncio.fixture
async def pending_order(db_session: AsyncSession, customer, product, second_product, address):
    """Checked-out order: 2 × product + 1 × second_product, status PENDING."""
    from services import cart_service, order_service

    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=product.id, quantity=2)
    await cart_service.add_to_cart(db_session, user_id=customer.id, product_id=second_product.id, quantity=1)
    order = await order_service.create_order(
        db_session, user_id=customer.id, shipping_address_id=address.id
    )
    await db_session.commit()
    return order


class FixedRandom:
    """Stand-in for payment_service._rng returning a constant draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def approve_payments(monkeypatch):
    from services import payment_service

    monkeypatch.setattr(payment_service, "_rng", FixedRandom(0.0))


@pytest.fixture
def reject_payments(monkeypatch):
    from services import payment_service

    monkeypatch.setattr(payment_service, "_rng", FixedRandom(0.999))
