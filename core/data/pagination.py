"""Keyset (ascending id) pagination shared by all list queries."""

from typing import Any, Callable, Optional, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.value_objects import Page


T = TypeVar("T")


async def fetch_keyset_page(
    session: AsyncSession,
    stmt: Select,
    id_column: Any,
    cursor: Optional[int],
    limit: int,
    to_domain: Callable[[Any], T],
) -> Page[T]:
    """Fetch one page of ``stmt`` ordered by ``id_column`` ascending.

    Reads ``limit + 1`` rows; the extra row only signals that more rows
    exist and is dropped from the page.

    Args:
        session: Session to execute on
        stmt: Select of a single ORM entity, already filtered
        id_column: Primary key column used as the keyset
        cursor: Last id seen by the caller, or None for the first page
        limit: Page size (must be positive)
        to_domain: Row → domain entity converter

    Returns:
        Page with ``next_cursor`` set to the last id in the page
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    if cursor is not None:
        stmt = stmt.where(id_column > cursor)
    stmt = stmt.order_by(id_column.asc()).limit(limit + 1)

    result = await session.execute(stmt)
    rows = list(result.scalars().all())

    has_more = len(rows) > limit
    if has_more:
        rows = rows[:limit]

    return Page(
        items=[to_domain(row) for row in rows],
        has_more=has_more,
        next_cursor=rows[-1].id if rows else None,
    )
