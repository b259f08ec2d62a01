"""Application DTOs."""

from .idempotency_dto import (
    ConfirmSucceeded,
    IdempotentResponse,
    OperationFailed,
    decode_response,
    encode_response,
)
from .order_dto import (
    ConfirmOrderRequest,
    CreateOrderRequest,
    OrderDTO,
    OrderItemDTO,
    OrderLineDTO,
    OrderPageDTO,
)
from .product_dto import CreateProductRequest, ProductDTO, ProductPageDTO

__all__ = [
    "ConfirmOrderRequest",
    "ConfirmSucceeded",
    "CreateOrderRequest",
    "CreateProductRequest",
    "decode_response",
    "encode_response",
    "IdempotentResponse",
    "OperationFailed",
    "OrderDTO",
    "OrderItemDTO",
    "OrderLineDTO",
    "OrderPageDTO",
    "ProductDTO",
    "ProductPageDTO",
]
