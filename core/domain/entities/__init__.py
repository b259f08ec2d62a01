"""Domain entities."""

from .idempotency_key import IdempotencyKey
from .order import Order, OrderItem
from .product import Product

__all__ = ["IdempotencyKey", "Order", "OrderItem", "Product"]
