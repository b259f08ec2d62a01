"""Unit of Work pattern for atomic transactions."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.value_objects import ExecutionID

from .repositories import (
    SqlAlchemyIdempotencyRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
)


logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle (one session = one transaction)
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories

    Leaving the context with an exception rolls everything back; leaving it
    without ``commit()`` discards pending work when the session closes.

    Usage:
        async with create_uow(session_factory) as uow:
            products = await uow.products.lock_many([1, 2])
            ...
            await uow.commit()
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None

        # Lazy-loaded repositories
        self._order_repository: Optional[SqlAlchemyOrderRepository] = None
        self._product_repository: Optional[SqlAlchemyProductRepository] = None
        self._idempotency_repository: Optional[SqlAlchemyIdempotencyRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, always close the session."""
        try:
            if exc_type is not None:
                logger.warning(
                    f"[{self._execution_id}] Transaction rolled back: "
                    f"{exc_type.__name__}: {exc_val}"
                )
                await self._session.rollback()
        finally:
            await self._session.close()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository.

        Returns:
            SqlAlchemyOrderRepository instance
        """
        if self._order_repository is None:
            self._order_repository = SqlAlchemyOrderRepository(self.session)
        return self._order_repository

    @property
    def products(self) -> SqlAlchemyProductRepository:
        """Lazy-load product (stock ledger) repository.

        Returns:
            SqlAlchemyProductRepository instance
        """
        if self._product_repository is None:
            self._product_repository = SqlAlchemyProductRepository(self.session)
        return self._product_repository

    @property
    def idempotency_keys(self) -> SqlAlchemyIdempotencyRepository:
        """Lazy-load idempotency key repository.

        Returns:
            SqlAlchemyIdempotencyRepository instance
        """
        if self._idempotency_repository is None:
            self._idempotency_repository = SqlAlchemyIdempotencyRepository(self.session)
        return self._idempotency_repository

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self.session.commit()
        logger.info(f"[{self._execution_id}] Transaction committed")

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self.session.rollback()
        logger.warning(f"[{self._execution_id}] Transaction rolled back")


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
