"""Application layer - services, interfaces, and DTOs."""

from .dtos import (
    ConfirmOrderRequest,
    CreateOrderRequest,
    CreateProductRequest,
    OrderDTO,
    OrderItemDTO,
    OrderPageDTO,
    ProductDTO,
    ProductPageDTO,
)
from .interfaces import ICustomerValidator
from .services import OrderTransactionEngine, ProductCatalogService

__all__ = [
    # DTOs
    "ConfirmOrderRequest",
    "CreateOrderRequest",
    "CreateProductRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderPageDTO",
    "ProductDTO",
    "ProductPageDTO",
    # Services
    "OrderTransactionEngine",
    "ProductCatalogService",
    # Interfaces
    "ICustomerValidator",
]
