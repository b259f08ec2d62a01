"""SQLAlchemy implementation of IdempotencyRepository."""

import logging
from datetime import datetime
from typing import Tuple

from sqlalchemy import insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import IdempotencyKey
from core.domain.enums import IdempotencyStatus
from core.domain.repositories import IdempotencyRepository

from ..mappers import IdempotencyKeyMapper, to_utc
from ..models import IdempotencyKeyModel


logger = logging.getLogger(__name__)

_KEYS = IdempotencyKeyModel.__table__


class SqlAlchemyIdempotencyRepository(IdempotencyRepository):
    """Idempotency key store backed by the unique ``key_value`` constraint."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def register_or_fetch(
        self,
        key_value: str,
        target_type: str,
        target_id: int,
        expires_at: datetime,
    ) -> Tuple[IdempotencyKey, bool]:
        """Insert-if-absent, then read back whatever row owns the key.

        Args:
            key_value: Caller-supplied key
            target_type: Kind of operation target (e.g. "order")
            target_id: Target id
            expires_at: Expiry stamped on a newly created row

        Returns:
            (stored key, True if this call inserted it)
        """
        values = dict(
            key_value=key_value,
            target_type=target_type,
            target_id=target_id,
            status=IdempotencyStatus.PENDING.value,
            expires_at=to_utc(expires_at),
        )
        created = await self._insert_if_absent(values)

        result = await self._session.execute(
            select(IdempotencyKeyModel)
            .where(IdempotencyKeyModel.key_value == key_value)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one()

        logger.debug(f"Idempotency key {key_value!r}: created={created} status={model.status}")
        return IdempotencyKeyMapper.to_domain(model), created

    async def complete(self, key_value: str, response_body: str, expires_at: datetime) -> bool:
        return await self._finalize(
            key_value,
            status=IdempotencyStatus.COMPLETED.value,
            response_body=response_body,
            expires_at=to_utc(expires_at),
        )

    async def fail(self, key_value: str, response_body: str) -> bool:
        return await self._finalize(
            key_value,
            status=IdempotencyStatus.FAILED.value,
            response_body=response_body,
        )

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    async def _insert_if_absent(self, values: dict) -> bool:
        dialect = self._session.bind.dialect.name

        if dialect in ("postgresql", "sqlite"):
            dialect_insert = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = dialect_insert(_KEYS).values(**values).on_conflict_do_nothing(
                index_elements=[_KEYS.c.key_value]
            )
            result = await self._session.execute(stmt)
            return result.rowcount == 1

        # Other backends: unique violation inside a savepoint
        try:
            async with self._session.begin_nested():
                await self._session.execute(insert(_KEYS).values(**values))
        except IntegrityError:
            return False
        return True

    async def _finalize(self, key_value: str, **values) -> bool:
        """Terminal transition; only ever applied to a PENDING row."""
        result = await self._session.execute(
            update(IdempotencyKeyModel)
            .where(
                IdempotencyKeyModel.key_value == key_value,
                IdempotencyKeyModel.status == IdempotencyStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
