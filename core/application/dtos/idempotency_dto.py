"""
Cached outcomes of idempotent operations.

A key's ``response_body`` holds exactly one of these, serialized through a
single pydantic ``TypeAdapter`` and decoded back into the same type when a
retry replays it.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from core.domain.exceptions import OrderEngineError

from .order_dto import OrderDTO


class ConfirmSucceeded(BaseModel):
    """Successful confirmation: the confirmed order as first returned."""

    outcome: Literal["success"] = "success"
    order: OrderDTO

    model_config = {"frozen": True}


class OperationFailed(BaseModel):
    """Failed operation: error code and message as first raised."""

    outcome: Literal["error"] = "error"
    code: str
    message: str

    model_config = {"frozen": True}

    @classmethod
    def from_error(cls, error: OrderEngineError) -> "OperationFailed":
        return cls(code=error.code, message=error.message)


IdempotentResponse = Annotated[
    Union[ConfirmSucceeded, OperationFailed], Field(discriminator="outcome")
]

_RESPONSE_ADAPTER: TypeAdapter = TypeAdapter(IdempotentResponse)


def encode_response(response: Union[ConfirmSucceeded, OperationFailed]) -> str:
    """Serialize a cached outcome to JSON text."""
    return _RESPONSE_ADAPTER.dump_json(response).decode("utf-8")


def decode_response(raw: str) -> Union[ConfirmSucceeded, OperationFailed]:
    """Parse JSON text produced by ``encode_response``."""
    return _RESPONSE_ADAPTER.validate_json(raw)
