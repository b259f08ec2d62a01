"""Domain enums."""

from .idempotency_status import IdempotencyStatus
from .order_status import OrderStatus

__all__ = ["IdempotencyStatus", "OrderStatus"]
