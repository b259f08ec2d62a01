from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.customers_settings import CustomersApiSettings
from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.order_policy_settings import OrderPolicySettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    database: DatabaseSettings
    customers: CustomersApiSettings
    orders: OrderPolicySettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(),
        customers=CustomersApiSettings(),
        orders=OrderPolicySettings(),
    )
