"""SQLAlchemy implementation of OrderRepository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.repositories import OrderRepository
from core.domain.value_objects import OrderFilters, Page

from ..mappers import OrderMapper, to_utc
from ..models import OrderItemModel, OrderModel
from ..pagination import fetch_keyset_page


def _with_items():
    return selectinload(OrderModel.items).selectinload(OrderItemModel.product)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, order: Order) -> Order:
        """Insert order and items, flushing to obtain ids.

        Args:
            order: Order domain aggregate

        Returns:
            Same aggregate with ids assigned
        """
        order_model = OrderMapper.to_persistence(order)
        self._session.add(order_model)
        await self._session.flush()  # Propagate to DB without committing

        order.id = order_model.id
        for item, item_model in zip(order.items, order_model.items):
            item.id = item_model.id
        return order

    async def find_by_id(self, order_id: int) -> Optional[Order]:
        """Retrieve order by id with items eagerly loaded.

        Args:
            order_id: Order id

        Returns:
            Order if found, None otherwise
        """
        result = await self._session.execute(
            select(OrderModel)
            .options(_with_items())
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def lock(self, order_id: int) -> Optional[Order]:
        """Retrieve order with SELECT ... FOR UPDATE on its row.

        Args:
            order_id: Order id

        Returns:
            Order if found, None otherwise
        """
        result = await self._session.execute(
            select(OrderModel)
            .options(_with_items())
            .where(OrderModel.id == order_id)
            .with_for_update(of=OrderModel)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def transition_status(
        self, order_id: int, expected: OrderStatus, new_status: OrderStatus
    ) -> bool:
        """Compare-and-set the order status.

        Args:
            order_id: Order id
            expected: Status the row must still have
            new_status: Status to write

        Returns:
            True if exactly one row was updated
        """
        result = await self._session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected.value)
            .values(status=new_status.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_page(
        self, filters: OrderFilters, cursor: Optional[int], limit: int
    ) -> Page[Order]:
        """List orders (with items) by ascending id.

        Args:
            filters: Status / created_at filters
            cursor: Last id seen, or None
            limit: Page size

        Returns:
            Page of orders
        """
        stmt = select(OrderModel).options(_with_items())

        if filters.status is not None:
            stmt = stmt.where(OrderModel.status == filters.status.value)
        if filters.created_from is not None:
            stmt = stmt.where(OrderModel.created_at >= to_utc(filters.created_from))
        if filters.created_to is not None:
            stmt = stmt.where(OrderModel.created_at <= to_utc(filters.created_to))

        return await fetch_keyset_page(
            self._session, stmt, OrderModel.id, cursor, limit, OrderMapper.to_domain
        )
