"""Order endpoints for REST API."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from core.application.dtos.order_dto import (
    ConfirmOrderRequest,
    CreateOrderRequest,
    OrderDTO,
    OrderPageDTO,
)
from core.application.services import OrderTransactionEngine
from core.domain.enums import OrderStatus
from core.domain.value_objects import OrderFilters

from apps.api.deps import get_order_engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderDTO, status_code=201)
async def create_order(
    request: CreateOrderRequest,
    engine: OrderTransactionEngine = Depends(get_order_engine),
) -> OrderDTO:
    """Create a new order against live stock.

    Args:
        request: CreateOrderRequest DTO
        engine: OrderTransactionEngine instance

    Returns:
        OrderDTO with created order details
    """
    order = await engine.create_order(
        request.customer_id, [line.to_domain() for line in request.items]
    )
    return OrderDTO.from_domain(order)


@router.get("/{order_id}", response_model=OrderDTO)
async def get_order(
    order_id: int,
    engine: OrderTransactionEngine = Depends(get_order_engine),
) -> OrderDTO:
    """Get order by ID."""
    return OrderDTO.from_domain(await engine.get_order(order_id))


@router.get("", response_model=OrderPageDTO)
async def list_orders(
    status: Optional[OrderStatus] = Query(default=None, description="Filter by status"),
    created_from: Optional[datetime] = Query(default=None, alias="from"),
    created_to: Optional[datetime] = Query(default=None, alias="to"),
    cursor: Optional[int] = Query(default=None, ge=0, description="Last id of the previous page"),
    limit: Optional[int] = Query(default=None, ge=1, description="Page size"),
    engine: OrderTransactionEngine = Depends(get_order_engine),
) -> OrderPageDTO:
    """List orders with keyset pagination.

    **Query Parameters:**
    - `status`: CREATED / CONFIRMED / CANCELED
    - `from`, `to`: inclusive creation time bounds
    - `cursor`: `cursor` value from the previous page
    - `limit`: page size (clamped to the configured maximum)
    """
    filters = OrderFilters(status=status, created_from=created_from, created_to=created_to)
    effective_limit = engine.policy.clamp_limit(limit)
    page = await engine.list_orders(filters=filters, cursor=cursor, limit=effective_limit)
    return OrderPageDTO.from_page(page, effective_limit)


@router.post("/{order_id}/confirm", response_model=OrderDTO)
async def confirm_order(
    order_id: int,
    request: Optional[ConfirmOrderRequest] = None,
    idempotency_key_header: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    engine: OrderTransactionEngine = Depends(get_order_engine),
) -> OrderDTO:
    """Confirm an order.

    The idempotency key comes from the body, or from the ``Idempotency-Key``
    header when the body omits it. Retries with the same key return the same
    response.
    """
    key = request.idempotency_key if request is not None else idempotency_key_header
    order = await engine.confirm_order(order_id, key or "")
    return OrderDTO.from_domain(order)


@router.post("/{order_id}/cancel", response_model=OrderDTO)
async def cancel_order(
    order_id: int,
    engine: OrderTransactionEngine = Depends(get_order_engine),
) -> OrderDTO:
    """Cancel an order and restock its items."""
    return OrderDTO.from_domain(await engine.cancel_order(order_id))
