"""Integration tests for cancellation and restocking."""
import pytest

from core.domain.enums import OrderStatus
from core.domain.exceptions import CancellationWindowExpiredError, OrderNotFoundError
from core.domain.value_objects import OrderLineRequest


class TestCancelOrder:

    @pytest.mark.asyncio
    async def test_cancel_created_order_restocks(self, engine, make_product, stocks_of):
        a = await make_product(price_cents=200, stock=5)
        b = await make_product(price_cents=500, stock=3)
        order = await engine.create_order(1, [OrderLineRequest(a.id, 2), OrderLineRequest(b.id, 1)])
        assert await stocks_of(a.id, b.id) == [3, 2]

        canceled = await engine.cancel_order(order.id)

        assert canceled.status is OrderStatus.CANCELED
        assert await stocks_of(a.id, b.id) == [5, 3]
        assert (await engine.get_order(order.id)).status is OrderStatus.CANCELED

    @pytest.mark.asyncio
    async def test_created_order_cancellable_long_after_creation(self, engine, make_product, clock, stock_of):
        a = await make_product(stock=5)
        order = await engine.create_order(1, [OrderLineRequest(a.id, 1)])

        clock.advance(days=3)
        await engine.cancel_order(order.id)

        assert await stock_of(a.id) == 5

    @pytest.mark.asyncio
    async def test_recancel_is_noop(self, engine, make_product, stock_of):
        a = await make_product(stock=5)
        order = await engine.create_order(1, [OrderLineRequest(a.id, 2)])

        await engine.cancel_order(order.id)
        again = await engine.cancel_order(order.id)

        assert again.status is OrderStatus.CANCELED
        assert await stock_of(a.id) == 5

    @pytest.mark.asyncio
    async def test_missing_order(self, engine):
        with pytest.raises(OrderNotFoundError):
            await engine.cancel_order(12345)


class TestGraceWindow:

    @pytest.fixture
    def confirmed_order(self, engine, make_product):
        async def _confirmed():
            product = await make_product(price_cents=100, stock=5)
            order = await engine.create_order(1, [OrderLineRequest(product.id, 2)])
            await engine.confirm_order(order.id, f"confirm-{order.id}")
            return order, product

        return _confirmed

    @pytest.mark.asyncio
    async def test_cancel_at_9m59s(self, engine, clock, confirmed_order, stock_of):
        order, product = await confirmed_order()

        clock.advance(minutes=9, seconds=59)
        canceled = await engine.cancel_order(order.id)

        assert canceled.status is OrderStatus.CANCELED
        assert await stock_of(product.id) == 5

    @pytest.mark.asyncio
    async def test_cancel_exactly_at_window(self, engine, clock, confirmed_order):
        order, _ = await confirmed_order()

        clock.advance(minutes=10)
        canceled = await engine.cancel_order(order.id)

        assert canceled.status is OrderStatus.CANCELED

    @pytest.mark.asyncio
    async def test_cancel_at_10m01s_leaves_state(self, engine, clock, confirmed_order, stock_of):
        order, product = await confirmed_order()

        clock.advance(minutes=10, seconds=1)
        with pytest.raises(CancellationWindowExpiredError):
            await engine.cancel_order(order.id)

        assert (await engine.get_order(order.id)).status is OrderStatus.CONFIRMED
        assert await stock_of(product.id) == 3

    @pytest.mark.asyncio
    async def test_shared_product_restock_is_additive(self, engine, make_product, stock_of):
        a = await make_product(stock=10)
        first = await engine.create_order(1, [OrderLineRequest(a.id, 3)])
        await engine.create_order(2, [OrderLineRequest(a.id, 4)])

        await engine.cancel_order(first.id)

        assert await stock_of(a.id) == 10 - 4
