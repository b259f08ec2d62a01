"""Application service for the product catalog."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import create_uow
from core.domain.entities import Product
from core.domain.exceptions import DuplicateSkuError, NotFoundError, ValidationError
from core.domain.value_objects import Page
from core.settings import OrderPolicySettings


logger = logging.getLogger(__name__)


class ProductCatalogService:
    """
    Catalog operations that feed the stock ledger.

    Stock is set once at creation; afterwards only order creation and
    cancellation move it.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        policy: Optional[OrderPolicySettings] = None,
    ) -> None:
        """Initialize product catalog service.

        Args:
            session_factory: SQLAlchemy async session factory
            policy: Paging limits
        """
        self._session_factory = session_factory
        self._policy = policy or OrderPolicySettings()

    @property
    def policy(self) -> OrderPolicySettings:
        return self._policy

    async def create_product(
        self, sku: str, name: str, price_cents: int, stock: int = 0
    ) -> Product:
        """Create a product with a unique SKU.

        Raises:
            ValidationError: Blank SKU/name or negative price/stock
            DuplicateSkuError: SKU already taken
        """
        if not sku or not sku.strip() or not name or not name.strip():
            raise ValidationError("SKU and name are required")
        if price_cents < 0 or stock < 0:
            raise ValidationError("Price and stock must be non-negative")

        async with create_uow(self._session_factory) as uow:
            if await uow.products.find_by_sku(sku) is not None:
                raise DuplicateSkuError(sku)

            try:
                product = await uow.products.add(
                    Product(sku=sku, name=name, price_cents=price_cents, stock=stock)
                )
                await uow.commit()
            except IntegrityError as e:
                raise DuplicateSkuError(sku) from e

            logger.info(f"[{uow.execution_id}] Created product {product.id} ({sku})")
            return product

    async def get_product(self, product_id: int) -> Product:
        """Get product by id.

        Raises:
            NotFoundError: No such product
        """
        async with create_uow(self._session_factory) as uow:
            product = await uow.products.find_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            return product

    async def list_products(
        self,
        search: Optional[str] = None,
        cursor: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Page[Product]:
        """List products by ascending id, optionally filtered by SKU/name."""
        async with create_uow(self._session_factory) as uow:
            return await uow.products.find_page(
                search, cursor, self._policy.clamp_limit(limit)
            )
