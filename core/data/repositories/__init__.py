"""SQLAlchemy repository implementations."""

from .idempotency_repository_impl import SqlAlchemyIdempotencyRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .product_repository_impl import SqlAlchemyProductRepository

__all__ = [
    "SqlAlchemyIdempotencyRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
]
