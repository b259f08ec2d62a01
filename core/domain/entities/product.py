"""Product entity (catalog row with its stock counter)."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Product:
    """A sellable product. ``stock`` is never negative."""
    sku: str
    name: str
    price_cents: int
    stock: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def has_stock_for(self, qty: int) -> bool:
        return self.stock >= qty
