# Settings package
from core.settings.modules import (
    AppSettings,
    CustomersApiSettings,
    DatabaseSettings,
    OrderPolicySettings,
    get_app_settings,
)

__all__ = [
    "get_app_settings",
    "AppSettings",
    "CustomersApiSettings",
    "DatabaseSettings",
    "OrderPolicySettings",
]
