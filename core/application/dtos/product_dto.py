"""Application DTOs for Product operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.entities import Product
from core.domain.value_objects import Page


class CreateProductRequest(BaseModel):
    """Request DTO for creating a product."""

    sku: str = Field(..., min_length=1, max_length=100, description="Unique SKU")
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    price_cents: int = Field(..., ge=0, description="Price in cents")
    stock: int = Field(default=0, ge=0, description="Initial stock")

    model_config = {"frozen": True}


class ProductDTO(BaseModel):
    """Response DTO for product details."""

    id: int
    sku: str
    name: str
    price_cents: int
    stock: int
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, product: Product) -> "ProductDTO":
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            price_cents=product.price_cents,
            stock=product.stock,
            created_at=product.created_at,
        )


class ProductPageDTO(BaseModel):
    """DTO for one page of products."""

    products: List[ProductDTO] = Field(default_factory=list)
    has_more: bool
    cursor: Optional[int] = None
    limit: int = Field(..., ge=1)

    model_config = {"frozen": True}

    @classmethod
    def from_page(cls, page: Page[Product], limit: int) -> "ProductPageDTO":
        return cls(
            products=[ProductDTO.from_domain(product) for product in page.items],
            has_more=page.has_more,
            cursor=page.next_cursor,
            limit=limit,
        )
