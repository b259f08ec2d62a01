"""Repository interface for products (the stock ledger)."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..entities.product import Product
from ..value_objects import Page


class ProductRepository(ABC):
    """
    Abstract stock ledger.

    Stock is only mutated through the conditional methods below, and only
    after the affected rows were locked with ``lock_many``.
    """

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """Insert a product and return it with its id assigned."""
        pass

    @abstractmethod
    async def find_by_id(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    async def find_by_sku(self, sku: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def lock_many(self, product_ids: Sequence[int]) -> List[Product]:
        """Lock the given product rows in ascending id order.

        Ids with no row are silently absent from the result.
        """
        pass

    @abstractmethod
    async def decrement_stock(self, product_id: int, qty: int) -> bool:
        """Subtract ``qty`` only if at least ``qty`` units remain.

        Returns:
            True if the row changed
        """
        pass

    @abstractmethod
    async def increment_stock(self, product_id: int, qty: int, observed_stock: int) -> bool:
        """Add ``qty`` only if the stock still equals ``observed_stock``.

        Returns:
            True if the row changed
        """
        pass

    @abstractmethod
    async def find_page(
        self, search: Optional[str], cursor: Optional[int], limit: int
    ) -> Page[Product]:
        """List products by ascending id, optionally matching SKU or name."""
        pass
