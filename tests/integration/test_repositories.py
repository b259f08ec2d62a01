"""Integration tests for the SQLAlchemy repositories behind the Unit of Work."""
from datetime import timedelta

import pytest

from core.data.uow import create_uow
from core.domain.enums import IdempotencyStatus, OrderStatus
from core.domain.value_objects import OrderLineRequest


class TestStockLedger:

    @pytest.mark.asyncio
    async def test_lock_many_sorted_deduplicated(self, session_factory, make_product):
        a = await make_product()
        b = await make_product()
        c = await make_product()

        async with create_uow(session_factory) as uow:
            locked = await uow.products.lock_many([c.id, a.id, 999, c.id, b.id])

        assert [p.id for p in locked] == [a.id, b.id, c.id]

    @pytest.mark.asyncio
    async def test_lock_many_empty(self, session_factory):
        async with create_uow(session_factory) as uow:
            assert await uow.products.lock_many([]) == []

    @pytest.mark.asyncio
    async def test_decrement_never_goes_negative(self, session_factory, make_product, stock_of):
        a = await make_product(stock=2)

        async with create_uow(session_factory) as uow:
            assert await uow.products.decrement_stock(a.id, 2)
            assert not await uow.products.decrement_stock(a.id, 1)
            await uow.commit()

        assert await stock_of(a.id) == 0

    @pytest.mark.asyncio
    async def test_increment_guarded_by_observed_stock(self, session_factory, make_product, stock_of):
        a = await make_product(stock=4)

        async with create_uow(session_factory) as uow:
            assert not await uow.products.increment_stock(a.id, 3, observed_stock=5)
            assert await uow.products.increment_stock(a.id, 3, observed_stock=4)
            await uow.commit()

        assert await stock_of(a.id) == 7

    @pytest.mark.asyncio
    async def test_uncommitted_work_is_discarded(self, session_factory, make_product, stock_of):
        a = await make_product(stock=4)

        with pytest.raises(RuntimeError):
            async with create_uow(session_factory) as uow:
                await uow.products.decrement_stock(a.id, 4)
                raise RuntimeError("boom")

        assert await stock_of(a.id) == 4

    @pytest.mark.asyncio
    async def test_explicit_rollback_discards_changes(self, session_factory, make_product, stock_of):
        a = await make_product(stock=4)

        async with create_uow(session_factory) as uow:
            assert await uow.products.decrement_stock(a.id, 3)
            await uow.rollback()

        assert await stock_of(a.id) == 4


class TestOrderRepository:

    @pytest.mark.asyncio
    async def test_transition_status_is_conditional(self, engine, session_factory, make_product):
        a = await make_product()
        order = await engine.create_order(1, [OrderLineRequest(a.id, 1)])

        async with create_uow(session_factory) as uow:
            assert not await uow.orders.transition_status(
                order.id, OrderStatus.CONFIRMED, OrderStatus.CANCELED
            )
            assert await uow.orders.transition_status(
                order.id, OrderStatus.CREATED, OrderStatus.CONFIRMED
            )
            await uow.commit()

        assert (await engine.get_order(order.id)).status is OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_lock_missing_order(self, session_factory):
        async with create_uow(session_factory) as uow:
            assert await uow.orders.lock(1) is None


class TestIdempotencyRepository:

    @pytest.mark.asyncio
    async def test_register_once_then_fetch(self, session_factory, clock):
        expires_at = clock() + timedelta(hours=1)

        async with create_uow(session_factory) as uow:
            key, created = await uow.idempotency_keys.register_or_fetch("k", "order", 1, expires_at)
            await uow.commit()
        assert created
        assert key.status is IdempotencyStatus.PENDING

        async with create_uow(session_factory) as uow:
            again, created_again = await uow.idempotency_keys.register_or_fetch(
                "k", "order", 2, expires_at
            )
        assert not created_again
        assert again.target_id == 1
        assert not again.targets("order", 2)

    @pytest.mark.asyncio
    async def test_terminal_state_is_final(self, session_factory, clock):
        expires_at = clock() + timedelta(hours=1)

        async with create_uow(session_factory) as uow:
            await uow.idempotency_keys.register_or_fetch("k", "order", 1, expires_at)
            assert await uow.idempotency_keys.complete("k", "{}", expires_at)
            assert not await uow.idempotency_keys.fail("k", "{}")
            await uow.commit()

        async with create_uow(session_factory) as uow:
            key, _ = await uow.idempotency_keys.register_or_fetch("k", "order", 1, expires_at)
        assert key.status is IdempotencyStatus.COMPLETED
        assert key.response_body == "{}"
