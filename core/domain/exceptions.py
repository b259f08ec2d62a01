"""
Order engine error taxonomy.

Every error carries a stable ``code`` so it can be cached in an
idempotency key and replayed, and mapped to an HTTP status at the edge.
"""
from typing import Dict, List, Optional, Type


class OrderEngineError(Exception):
    """Base class for all caller-facing order engine errors."""

    code = "ORDER_ENGINE_ERROR"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationError(OrderEngineError):
    """Malformed input, rejected before any transaction opens."""

    code = "VALIDATION_ERROR"


# =============================================================================
# NOT FOUND
# =============================================================================

class NotFoundError(OrderEngineError):
    """A referenced order, product or customer does not exist."""

    code = "NOT_FOUND"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class ProductNotFoundError(NotFoundError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, missing_ids: List[int]):
        ids = ", ".join(str(product_id) for product_id in missing_ids)
        super().__init__(f"Products not found: {ids}")
        self.missing_ids = list(missing_ids)


# =============================================================================
# BUSINESS RULES
# =============================================================================

class BusinessRuleError(OrderEngineError):
    """The request is well formed but violates a business rule."""

    code = "BUSINESS_RULE_VIOLATION"


class InsufficientStockError(BusinessRuleError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class InvalidTransitionError(BusinessRuleError):
    code = "INVALID_TRANSITION"

    def __init__(self, order_id: int, current_status: str):
        super().__init__(
            f"Order {order_id} cannot be confirmed. Current status: {current_status}"
        )
        self.order_id = order_id
        self.current_status = current_status


class CancellationWindowExpiredError(BusinessRuleError):
    code = "CANCELLATION_WINDOW_EXPIRED"

    def __init__(self, order_id: int, grace_minutes: int):
        super().__init__(
            f"Confirmed orders can only be canceled within {grace_minutes} "
            f"minutes of creation (order {order_id})"
        )
        self.order_id = order_id
        self.grace_minutes = grace_minutes


class InvalidKeyReuseError(BusinessRuleError):
    code = "INVALID_KEY_REUSE"

    def __init__(self, key_value: str):
        super().__init__(
            f"Idempotency key {key_value!r} already used for a different operation"
        )
        self.key_value = key_value


class OperationInProgressError(BusinessRuleError):
    code = "OPERATION_IN_PROGRESS"

    def __init__(self, key_value: str):
        super().__init__(f"Operation in progress for idempotency key {key_value!r}")
        self.key_value = key_value


class CustomerRejectedError(BusinessRuleError):
    code = "CUSTOMER_REJECTED"

    def __init__(self, customer_id: int):
        super().__init__(f"Customer {customer_id} not found or inactive")
        self.customer_id = customer_id


class DuplicateSkuError(BusinessRuleError):
    code = "DUPLICATE_SKU"

    def __init__(self, sku: str):
        super().__init__(f"SKU already exists: {sku}")
        self.sku = sku


# =============================================================================
# CONCURRENCY / UPSTREAM
# =============================================================================

class ConcurrencyError(OrderEngineError):
    """A conditional update affected zero rows."""

    code = "CONCURRENT_MODIFICATION"
    retryable = True


class UpstreamError(OrderEngineError):
    """The customer service was unreachable or answered with an error."""

    code = "UPSTREAM_UNAVAILABLE"
    retryable = True


ConcurrentModificationError = ConcurrencyError
UpstreamUnavailableError = UpstreamError


class ReplayedError(OrderEngineError):
    """
    Error rebuilt from a cached idempotency outcome.

    Only used when the stored code no longer maps to a known error class.
    """

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


def _collect_codes() -> Dict[str, Type[OrderEngineError]]:
    registry: Dict[str, Type[OrderEngineError]] = {}
    pending: List[Type[OrderEngineError]] = [OrderEngineError]
    while pending:
        cls = pending.pop()
        if cls is not ReplayedError:
            registry.setdefault(cls.code, cls)
        pending.extend(cls.__subclasses__())
    return registry


def restore_error(code: str, message: str) -> OrderEngineError:
    """
    Rebuild an error from its cached ``code`` and ``message``.

    The instance has the original class, so ``except InvalidTransitionError``
    matches a replayed failure exactly like the first one. Structured
    attributes (quantities, ids) are not cached and are absent on replays.
    """
    cls: Optional[Type[OrderEngineError]] = _collect_codes().get(code)
    if cls is None:
        return ReplayedError(code, message)
    error = cls.__new__(cls)
    OrderEngineError.__init__(error, message)
    return error
