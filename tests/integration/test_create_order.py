"""Integration tests for order creation against the stock ledger."""
import asyncio

import pytest
from sqlalchemy import func, select

from core.domain.enums import OrderStatus
from core.domain.exceptions import (
    CustomerRejectedError,
    InsufficientStockError,
    ProductNotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from core.domain.value_objects import OrderLineRequest
from core.data.models import OrderItemModel, OrderModel


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_two_products_decrements_stock(self, engine, clock, make_product, stocks_of):
        """A(stock 5, 200) x2 + B(stock 3, 500) x1 → total 900, stock 3 and 2."""
        a = await make_product(price_cents=200, stock=5)
        b = await make_product(price_cents=500, stock=3)

        order = await engine.create_order(
            customer_id=1,
            lines=[OrderLineRequest(a.id, 2), OrderLineRequest(b.id, 1)],
        )

        assert order.id is not None
        assert order.status is OrderStatus.CREATED
        assert order.total_cents == 900
        assert order.created_at == clock.now
        assert [(item.product_id, item.qty, item.subtotal_cents) for item in order.items] == [
            (a.id, 2, 400),
            (b.id, 1, 500),
        ]
        assert await stocks_of(a.id, b.id) == [3, 2]

    @pytest.mark.asyncio
    async def test_persisted_order_reconciles(self, engine, make_product):
        a = await make_product(price_cents=199, stock=10)
        b = await make_product(price_cents=1, stock=10)
        created = await engine.create_order(1, [OrderLineRequest(a.id, 3), OrderLineRequest(b.id, 7)])

        stored = await engine.get_order(created.id)

        stored.reconcile()
        assert stored.total_cents == 3 * 199 + 7
        assert [item.product_name for item in stored.items] == [a.name, b.name]

    @pytest.mark.asyncio
    async def test_duplicate_lines_are_merged(self, engine, make_product, stock_of):
        a = await make_product(price_cents=100, stock=5)

        order = await engine.create_order(1, [OrderLineRequest(a.id, 1), OrderLineRequest(a.id, 2)])

        assert len(order.items) == 1
        assert order.items[0].qty == 3
        assert await stock_of(a.id) == 2

    @pytest.mark.asyncio
    async def test_insufficient_stock_writes_nothing(self, engine, make_product, stocks_of, session_factory):
        a = await make_product(price_cents=200, stock=5)
        b = await make_product(price_cents=500, stock=1)

        with pytest.raises(InsufficientStockError) as exc_info:
            await engine.create_order(1, [OrderLineRequest(a.id, 2), OrderLineRequest(b.id, 2)])

        assert exc_info.value.product_id == b.id
        assert exc_info.value.available == 1
        assert exc_info.value.requested == 2
        assert await stocks_of(a.id, b.id) == [5, 1]
        assert await _count(session_factory, OrderModel) == 0
        assert await _count(session_factory, OrderItemModel) == 0

    @pytest.mark.asyncio
    async def test_qty_10_against_stock_5(self, engine, make_product, stock_of, session_factory):
        a = await make_product(price_cents=200, stock=5)

        with pytest.raises(InsufficientStockError) as exc_info:
            await engine.create_order(1, [OrderLineRequest(a.id, 10)])

        assert exc_info.value.message == (
            f"Insufficient stock for product {a.name}. Available: 5, Requested: 10"
        )
        assert await stock_of(a.id) == 5
        assert await _count(session_factory, OrderModel) == 0

    @pytest.mark.asyncio
    async def test_unknown_products_reported(self, engine, make_product, stock_of):
        a = await make_product(stock=5)

        with pytest.raises(ProductNotFoundError) as exc_info:
            await engine.create_order(1, [OrderLineRequest(a.id, 1), OrderLineRequest(999, 1)])

        assert exc_info.value.missing_ids == [999]
        assert await stock_of(a.id) == 5


class TestCreateOrderValidation:

    @pytest.mark.asyncio
    async def test_empty_order_rejected(self, engine, customers):
        with pytest.raises(ValidationError):
            await engine.create_order(1, [])
        assert customers.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("customer_id", [0, -1, True, "1"])
    async def test_bad_customer_id_rejected(self, engine, make_product, customer_id):
        a = await make_product()
        with pytest.raises(ValidationError):
            await engine.create_order(customer_id, [OrderLineRequest(a.id, 1)])

    @pytest.mark.asyncio
    async def test_raw_tuples_rejected(self, engine):
        with pytest.raises(ValidationError):
            await engine.create_order(1, [(1, 1)])


class TestCustomerCheck:

    @pytest.mark.asyncio
    async def test_unknown_customer_rejected(self, engine, make_product, stock_of, session_factory):
        a = await make_product(stock=5)

        with pytest.raises(CustomerRejectedError):
            await engine.create_order(42, [OrderLineRequest(a.id, 1)])

        assert await stock_of(a.id) == 5
        assert await _count(session_factory, OrderModel) == 0

    @pytest.mark.asyncio
    async def test_customer_removed_between_orders(self, engine, customers, make_product, stock_of):
        a = await make_product(stock=5)
        customers.add(42)
        await engine.create_order(42, [OrderLineRequest(a.id, 1)])

        customers.remove(42)
        with pytest.raises(CustomerRejectedError):
            await engine.create_order(42, [OrderLineRequest(a.id, 1)])

        assert await stock_of(a.id) == 4
        assert customers.calls == [42, 42]

    @pytest.mark.asyncio
    async def test_upstream_down_fails_closed(self, engine, customers, make_product, stock_of, session_factory):
        a = await make_product(stock=5)
        customers.unavailable = True

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await engine.create_order(1, [OrderLineRequest(a.id, 1)])

        assert exc_info.value.retryable
        assert await stock_of(a.id) == 5
        assert await _count(session_factory, OrderModel) == 0


class TestConcurrentCreate:

    @pytest.mark.asyncio
    async def test_last_unit_sold_once(self, engine, make_product, stock_of, session_factory):
        """Two buyers race for a single unit: exactly one wins."""
        a = await make_product(price_cents=100, stock=1)

        results = await asyncio.gather(
            engine.create_order(1, [OrderLineRequest(a.id, 1)]),
            engine.create_order(2, [OrderLineRequest(a.id, 1)]),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert await stock_of(a.id) == 0
        assert await _count(session_factory, OrderModel) == 1

    @pytest.mark.asyncio
    async def test_many_buyers_never_oversell(self, engine, make_product, stock_of):
        a = await make_product(price_cents=100, stock=3)

        results = await asyncio.gather(
            *(engine.create_order(c, [OrderLineRequest(a.id, 1)]) for c in range(1, 9)),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, Exception)) == 3
        assert all(isinstance(r, InsufficientStockError) for r in results if isinstance(r, Exception))
        assert await stock_of(a.id) == 0
