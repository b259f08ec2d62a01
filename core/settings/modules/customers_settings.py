from __future__ import annotations

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class CustomersApiSettings(OrdersBaseSettings):
    """Settings for the customers service consulted before order creation."""

    base_url: str = Field("http://localhost:3001/api/v1", alias="CUSTOMERS_API_BASE")
    service_token: str = Field("", alias="CUSTOMERS_API_TOKEN")
    timeout_seconds: float = Field(10.0, alias="CUSTOMERS_API_TIMEOUT")
