"""SQLAlchemy implementation of the stock ledger."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Product
from core.domain.repositories import ProductRepository
from core.domain.value_objects import Page

from ..mappers import ProductMapper
from ..models import ProductModel
from ..pagination import fetch_keyset_page


logger = logging.getLogger(__name__)


class SqlAlchemyProductRepository(ProductRepository):
    """Concrete implementation of ProductRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, product: Product) -> Product:
        model = ProductMapper.to_persistence(product)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return ProductMapper.to_domain(model)

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        model = await self._session.get(ProductModel, product_id, populate_existing=True)
        return ProductMapper.to_domain(model) if model else None

    async def find_by_sku(self, sku: str) -> Optional[Product]:
        result = await self._session.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        )
        model = result.scalar_one_or_none()
        return ProductMapper.to_domain(model) if model else None

    async def lock_many(self, product_ids: Sequence[int]) -> List[Product]:
        """Lock product rows in ascending id order.

        A fixed global lock order means two transactions touching overlapping
        product sets can never wait on each other in a cycle.

        Args:
            product_ids: Ids to lock (any order, duplicates allowed)

        Returns:
            Locked products sorted by id; missing ids are absent
        """
        ordered_ids = sorted(set(product_ids))
        if not ordered_ids:
            return []

        result = await self._session.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(ordered_ids))
            .order_by(ProductModel.id.asc())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        products = [ProductMapper.to_domain(model) for model in result.scalars().all()]
        logger.debug(f"Locked products: {[p.id for p in products]}")
        return products

    async def decrement_stock(self, product_id: int, qty: int) -> bool:
        result = await self._session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= qty)
            .values(stock=ProductModel.stock - qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def increment_stock(self, product_id: int, qty: int, observed_stock: int) -> bool:
        result = await self._session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock == observed_stock)
            .values(stock=ProductModel.stock + qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_page(
        self, search: Optional[str], cursor: Optional[int], limit: int
    ) -> Page[Product]:
        stmt = select(ProductModel)
        if search:
            stmt = stmt.where(
                or_(
                    ProductModel.sku.contains(search, autoescape=True),
                    ProductModel.name.contains(search, autoescape=True),
                )
            )

        return await fetch_keyset_page(
            self._session, stmt, ProductModel.id, cursor, limit, ProductMapper.to_domain
        )
