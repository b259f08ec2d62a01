"""Repository interfaces (ports)."""

from .idempotency_repository import IdempotencyRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository

__all__ = ["IdempotencyRepository", "OrderRepository", "ProductRepository"]
