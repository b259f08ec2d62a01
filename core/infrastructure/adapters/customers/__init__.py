"""Customer validator adapters."""

from .http_customer_validator import HttpCustomerValidator
from .mock_customer_validator import MockCustomerValidator

__all__ = ["HttpCustomerValidator", "MockCustomerValidator"]
