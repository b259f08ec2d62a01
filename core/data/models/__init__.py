"""Database models."""

from .base import Base
from .idempotency_model import IdempotencyKeyModel
from .order_model import OrderItemModel, OrderModel
from .product_model import ProductModel

__all__ = [
    "Base",
    "IdempotencyKeyModel",
    "OrderItemModel",
    "OrderModel",
    "ProductModel",
]
