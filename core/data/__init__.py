"""Data layer - infrastructure persistence and mapping."""

from .mappers import IdempotencyKeyMapper, OrderItemMapper, OrderMapper, ProductMapper
from .models import Base, IdempotencyKeyModel, OrderItemModel, OrderModel, ProductModel
from .pagination import fetch_keyset_page
from .repositories import (
    SqlAlchemyIdempotencyRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
)
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_uow",
    "fetch_keyset_page",
    "IdempotencyKeyMapper",
    "IdempotencyKeyModel",
    "OrderItemMapper",
    "OrderItemModel",
    "OrderMapper",
    "OrderModel",
    "ProductMapper",
    "ProductModel",
    "SqlAlchemyIdempotencyRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "UnitOfWork",
]
