"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID, uuid4

from ..enums import OrderStatus


T = TypeVar("T")


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for tracing one unit of work across log lines."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


@dataclass(frozen=True)
class OrderLineRequest:
    """
    One requested line of a new order.

    Quantity must be a positive integer; booleans are rejected even though
    they are ``int`` subclasses.
    """
    product_id: int
    qty: int

    def __post_init__(self):
        from ..exceptions import ValidationError

        if not _is_positive_int(self.product_id):
            raise ValidationError(f"Invalid product id: {self.product_id!r}")
        if not _is_positive_int(self.qty):
            raise ValidationError(f"Invalid qty for product {self.product_id}")


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class OrderFilters:
    """Optional filters for order listing. Date bounds are inclusive."""

    status: Optional[OrderStatus] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One keyset page.

    ``next_cursor`` is the id of the last row in ``items`` (``None`` when the
    page is empty); pass it back as ``cursor`` to fetch the following page.
    """
    items: List[T] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[int] = None
