"""Application DTOs for Order operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.entities import Order, OrderItem
from core.domain.enums import OrderStatus
from core.domain.value_objects import OrderLineRequest, Page


class OrderLineDTO(BaseModel):
    """DTO for one requested order line."""

    product_id: int = Field(..., gt=0, description="Product id")
    qty: int = Field(..., gt=0, description="Quantity ordered")

    model_config = {"frozen": True, "strict": True}

    def to_domain(self) -> OrderLineRequest:
        return OrderLineRequest(product_id=self.product_id, qty=self.qty)


class CreateOrderRequest(BaseModel):
    """Request DTO for creating an order."""

    customer_id: int = Field(..., gt=0, description="Customer id")
    items: List[OrderLineDTO] = Field(..., min_length=1, description="Requested lines")

    model_config = {"frozen": True}


class ConfirmOrderRequest(BaseModel):
    """Request DTO for confirming an order."""

    idempotency_key: str = Field(..., min_length=1, max_length=255, description="Idempotency key")

    model_config = {"frozen": True}


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    product_id: int = Field(..., description="Product id")
    product_name: Optional[str] = Field(None, description="Product name")
    qty: int = Field(..., gt=0, description="Quantity ordered")
    unit_price_cents: int = Field(..., ge=0, description="Unit price snapshot in cents")
    subtotal_cents: int = Field(..., ge=0, description="qty x unit price in cents")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: int = Field(..., description="Order id")
    customer_id: int = Field(..., description="Customer id")
    status: OrderStatus = Field(..., description="Order status")
    total_cents: int = Field(..., ge=0, description="Total order amount in cents")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    items: List[OrderItemDTO] = Field(default_factory=list, description="Order items")

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, order: Order) -> "OrderDTO":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            status=order.status,
            total_cents=order.total_cents,
            created_at=order.created_at,
            items=[
                OrderItemDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    qty=item.qty,
                    unit_price_cents=item.unit_price_cents,
                    subtotal_cents=item.subtotal_cents,
                )
                for item in order.items
            ],
        )

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            customer_id=self.customer_id,
            status=self.status,
            total_cents=self.total_cents,
            created_at=self.created_at,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    qty=item.qty,
                    unit_price_cents=item.unit_price_cents,
                    subtotal_cents=item.subtotal_cents,
                )
                for item in self.items
            ],
        )


class OrderPageDTO(BaseModel):
    """DTO for one page of orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    has_more: bool = Field(..., description="More rows exist after this page")
    cursor: Optional[int] = Field(None, description="Id of the last order in this page")
    limit: int = Field(..., ge=1, description="Page size used")

    model_config = {"frozen": True}

    @classmethod
    def from_page(cls, page: Page[Order], limit: int) -> "OrderPageDTO":
        return cls(
            orders=[OrderDTO.from_domain(order) for order in page.items],
            has_more=page.has_more,
            cursor=page.next_cursor,
            limit=limit,
        )
