"""Product endpoints for REST API."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.application.dtos.product_dto import (
    CreateProductRequest,
    ProductDTO,
    ProductPageDTO,
)
from core.application.services import ProductCatalogService

from apps.api.deps import get_product_service

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductDTO, status_code=201)
async def create_product(
    request: CreateProductRequest,
    service: ProductCatalogService = Depends(get_product_service),
) -> ProductDTO:
    """Create a product."""
    product = await service.create_product(
        sku=request.sku,
        name=request.name,
        price_cents=request.price_cents,
        stock=request.stock,
    )
    return ProductDTO.from_domain(product)


@router.get("/{product_id}", response_model=ProductDTO)
async def get_product(
    product_id: int,
    service: ProductCatalogService = Depends(get_product_service),
) -> ProductDTO:
    """Get product by ID."""
    return ProductDTO.from_domain(await service.get_product(product_id))


@router.get("", response_model=ProductPageDTO)
async def list_products(
    search: Optional[str] = Query(default=None, max_length=255),
    cursor: Optional[int] = Query(default=None, ge=0),
    limit: Optional[int] = Query(default=None, ge=1),
    service: ProductCatalogService = Depends(get_product_service),
) -> ProductPageDTO:
    """List products with keyset pagination."""
    page = await service.list_products(search=search, cursor=cursor, limit=limit)
    # Echo the limit actually applied by the service
    return ProductPageDTO.from_page(page, service.policy.clamp_limit(limit))
