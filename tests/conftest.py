"""Shared pytest fixtures: file-backed SQLite store, fake clock, customer double."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.application.services import OrderTransactionEngine, ProductCatalogService
from core.data.uow import create_uow
from core.domain.entities import Product
from core.infrastructure.adapters.customers import MockCustomerValidator
from core.infrastructure.database.config import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
)
from core.settings import DatabaseSettings, OrderPolicySettings


T0 = datetime(2025, 1, 13, 10, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock injected into the engine."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def database_settings(tmp_path) -> DatabaseSettings:
    """Per-test SQLite file (real locking, unlike :memory:)."""
    return DatabaseSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
        sqlite_busy_timeout=30.0,
    )


@pytest_asyncio.fixture
async def test_engine(database_settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_engine(database_settings)
    await init_database(engine)
    yield engine
    await close_database(engine)


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest.fixture
def policy() -> OrderPolicySettings:
    return OrderPolicySettings(
        cancellation_grace_minutes=10,
        idempotency_ttl_hours=24,
        default_page_limit=10,
        max_page_limit=100,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def customers() -> MockCustomerValidator:
    """Directory that knows customers 1-10."""
    return MockCustomerValidator(known_ids=range(1, 11))


@pytest.fixture
def engine(session_factory, customers, policy, clock) -> OrderTransactionEngine:
    return OrderTransactionEngine(
        session_factory=session_factory,
        customer_validator=customers,
        policy=policy,
        clock=clock,
    )


@pytest.fixture
def catalog(session_factory, policy) -> ProductCatalogService:
    return ProductCatalogService(session_factory=session_factory, policy=policy)


@pytest.fixture
def make_product(catalog):
    """Create a product with a generated SKU."""
    counter = {"n": 0}

    async def _make(price_cents: int = 100, stock: int = 10, name: str = None) -> Product:
        counter["n"] += 1
        sku = f"SKU-{counter['n']:03d}"
        return await catalog.create_product(
            sku=sku, name=name or f"Product {counter['n']}", price_cents=price_cents, stock=stock
        )

    return _make


@pytest.fixture
def stock_of(session_factory):
    """Read the current stock counter of a product."""

    async def _stock(product_id: int) -> int:
        async with create_uow(session_factory) as uow:
            product = await uow.products.find_by_id(product_id)
            return product.stock

    return _stock


@pytest.fixture
def stocks_of(stock_of):
    async def _stocks(*product_ids: int) -> List[int]:
        return [await stock_of(product_id) for product_id in product_ids]

    return _stocks
