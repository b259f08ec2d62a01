"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.order import Order
from ..enums import OrderStatus
from ..value_objects import OrderFilters, Page


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Insert a new order together with all of its items.

        Args:
            order: Order aggregate without an id

        Returns:
            The same aggregate with ``id`` (and item ids) assigned
        """
        pass

    @abstractmethod
    async def find_by_id(self, order_id: int) -> Optional[Order]:
        """Retrieve order (with items) by id.

        Args:
            order_id: Order surrogate id

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def lock(self, order_id: int) -> Optional[Order]:
        """Retrieve order with an exclusive row lock held until commit/rollback.

        Args:
            order_id: Order surrogate id

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def transition_status(
        self, order_id: int, expected: OrderStatus, new_status: OrderStatus
    ) -> bool:
        """Conditionally move an order from ``expected`` to ``new_status``.

        Returns:
            True if exactly one row changed, False if the precondition no
            longer held
        """
        pass

    @abstractmethod
    async def find_page(
        self, filters: OrderFilters, cursor: Optional[int], limit: int
    ) -> Page[Order]:
        """List orders by ascending id after ``cursor``.

        Args:
            filters: Status / creation date filters
            cursor: Last id seen by the caller, or None for the first page
            limit: Page size

        Returns:
            Page of Order aggregates
        """
        pass
