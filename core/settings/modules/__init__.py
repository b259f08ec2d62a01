# Settings modules
from .app_settings import AppSettings, get_app_settings
from .customers_settings import CustomersApiSettings
from .database_settings import DatabaseSettings
from .order_policy_settings import OrderPolicySettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "CustomersApiSettings",
    "DatabaseSettings",
    "OrderPolicySettings",
]
