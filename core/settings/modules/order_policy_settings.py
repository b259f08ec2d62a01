from __future__ import annotations

from datetime import timedelta

from pydantic import Field

from core.settings.base import OrdersBaseSettings


class OrderPolicySettings(OrdersBaseSettings):
    """Business policy knobs for the order engine."""

    cancellation_grace_minutes: int = Field(10, ge=0, alias="ORDERS_CANCELLATION_GRACE_MINUTES")
    idempotency_ttl_hours: int = Field(24, ge=1, alias="ORDERS_IDEMPOTENCY_TTL_HOURS")
    default_page_limit: int = Field(10, ge=1, alias="ORDERS_DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(100, ge=1, alias="ORDERS_MAX_PAGE_LIMIT")

    @property
    def cancellation_grace(self) -> timedelta:
        return timedelta(minutes=self.cancellation_grace_minutes)

    @property
    def idempotency_ttl(self) -> timedelta:
        return timedelta(hours=self.idempotency_ttl_hours)

    def clamp_limit(self, limit: int | None) -> int:
        """Default a missing limit and clamp it to ``[1, max_page_limit]``."""
        if limit is None:
            return self.default_page_limit
        return max(1, min(limit, self.max_page_limit))
