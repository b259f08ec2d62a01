"""
Order Status Enum.

Lifecycle values for orders.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order status values."""

    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
