"""Domain value objects."""

from .value_objects import ExecutionID, OrderFilters, OrderLineRequest, Page

__all__ = [
    "ExecutionID",
    "OrderFilters",
    "OrderLineRequest",
    "Page",
]
