"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..enums import OrderStatus
from .product import Product


@dataclass
class OrderItem:
    """
    Individual line item within an order.

    ``unit_price_cents`` is a snapshot of the product price when the order
    was placed and never follows later catalog price changes.
    """
    product_id: int
    qty: int
    unit_price_cents: int
    subtotal_cents: int
    product_name: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def priced(cls, product: Product, qty: int) -> "OrderItem":
        """Price ``qty`` units of ``product`` at its current catalog price."""
        return cls(
            product_id=product.id,
            qty=qty,
            unit_price_cents=product.price_cents,
            subtotal_cents=product.price_cents * qty,
            product_name=product.name,
        )

    def calculate_subtotal(self) -> int:
        """Recalculate subtotal based on quantity and unit price."""
        calculated = self.unit_price_cents * self.qty
        if calculated != self.subtotal_cents:
            raise ValueError(f"Subtotal mismatch: {calculated} vs {self.subtotal_cents}")
        return calculated


@dataclass
class Order:
    """
    Order aggregate root.

    Money is held in integer cents; ``total_cents`` always equals the sum of
    the item subtotals.
    """
    customer_id: int
    created_at: datetime
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.CREATED
    total_cents: int = 0
    id: Optional[int] = None

    @classmethod
    def place(cls, customer_id: int, items: List[OrderItem], created_at: datetime) -> "Order":
        """Build a new CREATED order and compute its total."""
        order = cls(customer_id=customer_id, created_at=created_at, items=list(items))
        order._recalculate_total()
        return order

    def _recalculate_total(self) -> None:
        """Internal: Sum all item subtotals."""
        self.total_cents = sum(item.calculate_subtotal() for item in self.items)

    def reconcile(self) -> None:
        """Raise ``ValueError`` if the stored total disagrees with the items."""
        expected = sum(item.calculate_subtotal() for item in self.items)
        if expected != self.total_cents:
            raise ValueError(
                f"Order {self.id} total mismatch: {self.total_cents} vs {expected}"
            )

    def cancellation_allowed_at(self, now: datetime, grace_window: timedelta) -> bool:
        """
        Business rule: CREATED orders are always cancellable, CONFIRMED ones
        only while ``now - created_at`` does not exceed the grace window.
        """
        if self.status == OrderStatus.CONFIRMED:
            return now - self.created_at <= grace_window
        return True

    @property
    def is_canceled(self) -> bool:
        return self.status == OrderStatus.CANCELED
