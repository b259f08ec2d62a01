"""Domain layer - pure domain models and interfaces."""

from .entities import IdempotencyKey, Order, OrderItem, Product
from .enums import IdempotencyStatus, OrderStatus
from .repositories import IdempotencyRepository, OrderRepository, ProductRepository
from .value_objects import ExecutionID, OrderFilters, OrderLineRequest, Page

__all__ = [
    "ExecutionID",
    "IdempotencyKey",
    "IdempotencyRepository",
    "IdempotencyStatus",
    "Order",
    "OrderFilters",
    "OrderItem",
    "OrderLineRequest",
    "OrderRepository",
    "OrderStatus",
    "Page",
    "Product",
    "ProductRepository",
]
