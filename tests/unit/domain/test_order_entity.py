"""Unit tests for the Order aggregate and its items."""
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.entities import Order, OrderItem, Product
from core.domain.enums import OrderStatus


CREATED_AT = datetime(2025, 1, 13, 10, 0, tzinfo=timezone.utc)
GRACE = timedelta(minutes=10)


def _product(pid: int, price_cents: int, stock: int = 10) -> Product:
    return Product(id=pid, sku=f"SKU-{pid}", name=f"Product {pid}", price_cents=price_cents, stock=stock)


class TestOrderPlacement:
    """Pricing and totals of a new order."""

    def test_items_snapshot_catalog_price(self):
        item = OrderItem.priced(_product(1, 250), qty=3)

        assert item.unit_price_cents == 250
        assert item.subtotal_cents == 750
        assert item.product_name == "Product 1"

    def test_total_is_sum_of_subtotals(self):
        order = Order.place(
            customer_id=7,
            items=[OrderItem.priced(_product(1, 200), 2), OrderItem.priced(_product(2, 500), 1)],
            created_at=CREATED_AT,
        )

        assert order.status == OrderStatus.CREATED
        assert order.total_cents == 900
        order.reconcile()

    def test_reconcile_detects_tampered_total(self):
        order = Order.place(7, [OrderItem.priced(_product(1, 200), 2)], CREATED_AT)
        order.total_cents = 1

        with pytest.raises(ValueError, match="total mismatch"):
            order.reconcile()

    def test_subtotal_mismatch_raises(self):
        item = OrderItem(product_id=1, qty=2, unit_price_cents=100, subtotal_cents=150)

        with pytest.raises(ValueError, match="Subtotal mismatch"):
            item.calculate_subtotal()


class TestCancellationWindow:
    """Grace window rule for CONFIRMED orders."""

    def _order(self, status: OrderStatus) -> Order:
        return Order(customer_id=1, created_at=CREATED_AT, status=status)

    def test_created_order_always_cancellable(self):
        order = self._order(OrderStatus.CREATED)
        assert order.cancellation_allowed_at(CREATED_AT + timedelta(days=30), GRACE)

    def test_confirmed_inside_window(self):
        order = self._order(OrderStatus.CONFIRMED)
        assert order.cancellation_allowed_at(CREATED_AT + timedelta(minutes=9, seconds=59), GRACE)

    def test_confirmed_exactly_at_window_edge(self):
        order = self._order(OrderStatus.CONFIRMED)
        assert order.cancellation_allowed_at(CREATED_AT + GRACE, GRACE)

    def test_confirmed_past_window(self):
        order = self._order(OrderStatus.CONFIRMED)
        assert not order.cancellation_allowed_at(CREATED_AT + timedelta(minutes=10, seconds=1), GRACE)
