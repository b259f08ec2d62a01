"""Application services."""
from .order_service import OrderTransactionEngine
from .product_service import ProductCatalogService

__all__ = ["OrderTransactionEngine", "ProductCatalogService"]
