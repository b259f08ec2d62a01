"""
Order transaction engine.

Creates orders against live stock, confirms them exactly once under retries
and enforces the cancellation grace window. Every operation runs in one
local transaction (one Unit of Work); any error rolls the whole operation
back before it reaches the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, NoReturn, Optional, Sequence

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.idempotency_dto import (
    ConfirmSucceeded,
    OperationFailed,
    decode_response,
    encode_response,
)
from core.application.dtos.order_dto import OrderDTO
from core.application.interfaces import ICustomerValidator
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import IdempotencyKey, Order, OrderItem
from core.domain.enums import IdempotencyStatus, OrderStatus
from core.domain.exceptions import (
    CancellationWindowExpiredError,
    ConcurrentModificationError,
    CustomerRejectedError,
    InsufficientStockError,
    InvalidKeyReuseError,
    InvalidTransitionError,
    OperationInProgressError,
    OrderEngineError,
    OrderNotFoundError,
    ProductNotFoundError,
    ValidationError,
    restore_error,
)
from core.domain.value_objects import OrderFilters, OrderLineRequest, Page
from core.settings import OrderPolicySettings


logger = logging.getLogger(__name__)

ORDER_TARGET = "order"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderTransactionEngine:
    """
    Application service for order lifecycle operations.

    Responsibilities:
    - Validate input before any transaction opens
    - Consult the customer validator (outside the transaction)
    - Lock, check and mutate stock and order rows inside one Unit of Work
    - Record and replay idempotent confirmation outcomes

    The customer check and the order commit are not atomic: a customer
    deactivated between the two can still receive an order.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        customer_validator: ICustomerValidator,
        policy: Optional[OrderPolicySettings] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize order transaction engine.

        Args:
            session_factory: SQLAlchemy async session factory
            customer_validator: Customer-existence check
            policy: Grace window, key TTL and paging limits
            clock: Returns the current aware UTC time
        """
        self._session_factory = session_factory
        self._customers = customer_validator
        self._policy = policy or OrderPolicySettings()
        self._clock = clock

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create_order(
        self, customer_id: int, lines: Sequence[OrderLineRequest]
    ) -> Order:
        """Create a CREATED order and decrement stock atomically.

        Args:
            customer_id: Ordering customer
            lines: Requested (product_id, qty) lines; duplicates are merged

        Returns:
            Persisted order with items

        Raises:
            ValidationError: Empty or malformed request
            CustomerRejectedError: Customer missing or inactive
            UpstreamUnavailableError: Customer check could not be made
            ProductNotFoundError: Some product ids have no row
            InsufficientStockError: A product has fewer units than requested
            ConcurrentModificationError: A guarded stock update lost a race
        """
        if isinstance(customer_id, bool) or not isinstance(customer_id, int) or customer_id <= 0:
            raise ValidationError(f"Invalid customer id: {customer_id!r}")
        qty_by_product = self._merge_lines(lines)

        if not await self._customers.exists(customer_id):
            raise CustomerRejectedError(customer_id)

        async with create_uow(self._session_factory) as uow:
            products = await uow.products.lock_many(list(qty_by_product))

            found = {product.id for product in products}
            missing = sorted(pid for pid in qty_by_product if pid not in found)
            if missing:
                raise ProductNotFoundError(missing)

            items = []
            for product in products:
                qty = qty_by_product[product.id]
                if not product.has_stock_for(qty):
                    raise InsufficientStockError(
                        product_id=product.id,
                        product_name=product.name,
                        available=product.stock,
                        requested=qty,
                    )
                items.append(OrderItem.priced(product, qty))

            order = Order.place(customer_id, items, created_at=self._clock())
            await uow.orders.add(order)

            for item in order.items:
                if not await uow.products.decrement_stock(item.product_id, item.qty):
                    raise ConcurrentModificationError(
                        f"Concurrent stock update detected for product {item.product_id}"
                    )

            await uow.commit()

            logger.info(
                f"[{uow.execution_id}] Created order {order.id} for customer "
                f"{customer_id}: {len(order.items)} item(s), total_cents={order.total_cents}"
            )
            return order

    @staticmethod
    def _merge_lines(lines: Sequence[OrderLineRequest]) -> Dict[int, int]:
        """Validate lines and sum quantities per product."""
        if not lines:
            raise ValidationError("Order must contain at least one item")

        qty_by_product: Dict[int, int] = {}
        for line in lines:
            if not isinstance(line, OrderLineRequest):
                raise ValidationError(f"Invalid order line: {line!r}")
            qty_by_product[line.product_id] = qty_by_product.get(line.product_id, 0) + line.qty
        return qty_by_product

    # =========================================================================
    # CONFIRM
    # =========================================================================

    async def confirm_order(self, order_id: int, idempotency_key: str) -> Order:
        """Confirm a CREATED order, at most once per idempotency key.

        Retrying with the same key returns the cached result (or re-raises
        the cached error) without touching the order again. A new key on an
        order that is already CONFIRMED fails with InvalidTransitionError and
        is recorded FAILED; only the key that confirmed it replays success.

        Args:
            order_id: Order to confirm
            idempotency_key: Caller-supplied key, unique per logical request

        Returns:
            The confirmed order, identical for every call with this key

        Raises:
            ValidationError: Blank key
            InvalidKeyReuseError: Key already used for another target
            OperationInProgressError: Another call owns this PENDING key
            OrderNotFoundError: No such order
            InvalidTransitionError: Order is not CREATED
            ConcurrentModificationError: Guarded status update lost a race
        """
        if not idempotency_key or not idempotency_key.strip():
            raise ValidationError("Idempotency key required")

        async with create_uow(self._session_factory) as uow:
            now = self._clock()
            expires_at = now + self._policy.idempotency_ttl

            key, created = await uow.idempotency_keys.register_or_fetch(
                idempotency_key, ORDER_TARGET, order_id, expires_at
            )

            if not key.targets(ORDER_TARGET, order_id):
                raise InvalidKeyReuseError(idempotency_key)

            if key.status is IdempotencyStatus.COMPLETED:
                logger.info(f"[{uow.execution_id}] Replaying confirmation for key {idempotency_key!r}")
                return await self._replay_success(uow, key)

            if key.status is IdempotencyStatus.FAILED:
                logger.info(f"[{uow.execution_id}] Replaying failure for key {idempotency_key!r}")
                raise self._replay_failure(key)

            if not created:
                raise OperationInProgressError(idempotency_key)

            order = await uow.orders.lock(order_id)
            if order is None:
                await self._fail_key(uow, idempotency_key, OrderNotFoundError(order_id))

            if order.status is not OrderStatus.CREATED:
                await self._fail_key(
                    uow,
                    idempotency_key,
                    InvalidTransitionError(order_id, order.status.value),
                )

            transitioned = await uow.orders.transition_status(
                order_id, OrderStatus.CREATED, OrderStatus.CONFIRMED
            )
            if not transitioned:
                await self._fail_key(
                    uow,
                    idempotency_key,
                    ConcurrentModificationError("Concurrent confirmation detected"),
                )

            order.status = OrderStatus.CONFIRMED
            snapshot = ConfirmSucceeded(order=OrderDTO.from_domain(order))
            await uow.idempotency_keys.complete(
                idempotency_key, encode_response(snapshot), expires_at
            )
            await uow.commit()

            logger.info(f"[{uow.execution_id}] Confirmed order {order_id} (key {idempotency_key!r})")
            return snapshot.order.to_domain()

    async def _replay_success(self, uow: UnitOfWork, key: IdempotencyKey) -> Order:
        if key.response_body is None:
            order = await uow.orders.find_by_id(key.target_id)
            if order is None:
                raise OrderNotFoundError(key.target_id)
            return order

        cached = decode_response(key.response_body)
        if isinstance(cached, OperationFailed):
            raise restore_error(cached.code, cached.message)
        return cached.order.to_domain()

    @staticmethod
    def _replay_failure(key: IdempotencyKey) -> OrderEngineError:
        if key.response_body is None:
            return ConcurrentModificationError(
                f"Idempotency key {key.key_value!r} failed without a recorded error"
            )
        cached = decode_response(key.response_body)
        if isinstance(cached, ConfirmSucceeded):
            return ConcurrentModificationError(
                f"Idempotency key {key.key_value!r} is FAILED but holds a success response"
            )
        return restore_error(cached.code, cached.message)

    async def _fail_key(
        self, uow: UnitOfWork, key_value: str, error: OrderEngineError
    ) -> NoReturn:
        """Record ``error`` on the key, commit that alone, then raise it.

        Only called before any order or stock row was modified, so the
        commit persists nothing but the key's terminal state.
        """
        await uow.idempotency_keys.fail(
            key_value, encode_response(OperationFailed.from_error(error))
        )
        await uow.commit()
        logger.warning(f"[{uow.execution_id}] Idempotency key {key_value!r} FAILED: {error}")
        raise error

    # =========================================================================
    # CANCEL
    # =========================================================================

    async def cancel_order(self, order_id: int) -> Order:
        """Cancel an order and restock its items.

        CREATED orders can always be canceled; CONFIRMED ones only within the
        grace window from creation. Canceling a CANCELED order returns it
        unchanged.

        Raises:
            OrderNotFoundError: No such order
            CancellationWindowExpiredError: CONFIRMED past the grace window
            ConcurrentModificationError: Guarded update lost a race
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.lock(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            if order.is_canceled:
                return order

            if not order.cancellation_allowed_at(self._clock(), self._policy.cancellation_grace):
                raise CancellationWindowExpiredError(
                    order_id, self._policy.cancellation_grace_minutes
                )

            transitioned = await uow.orders.transition_status(
                order_id, order.status, OrderStatus.CANCELED
            )
            if not transitioned:
                raise ConcurrentModificationError(
                    f"Concurrent status change detected for order {order_id}"
                )

            await self._restock(uow, order)

            order.status = OrderStatus.CANCELED
            await uow.commit()

            logger.info(f"[{uow.execution_id}] Canceled order {order_id}, restocked {len(order.items)} item(s)")
            return order

    @staticmethod
    async def _restock(uow: UnitOfWork, order: Order) -> None:
        qty_by_product: Dict[int, int] = {}
        for item in order.items:
            qty_by_product[item.product_id] = qty_by_product.get(item.product_id, 0) + item.qty

        products = await uow.products.lock_many(list(qty_by_product))
        found = {product.id for product in products}
        missing = sorted(pid for pid in qty_by_product if pid not in found)
        if missing:
            raise ProductNotFoundError(missing)

        for product in products:
            restocked = await uow.products.increment_stock(
                product.id, qty_by_product[product.id], observed_stock=product.stock
            )
            if not restocked:
                raise ConcurrentModificationError(
                    f"Concurrent stock update detected for product {product.id}"
                )

    # =========================================================================
    # READ
    # =========================================================================

    async def get_order(self, order_id: int) -> Order:
        """Get order by id.

        Raises:
            OrderNotFoundError: No such order
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            return order

    async def list_orders(
        self,
        filters: Optional[OrderFilters] = None,
        cursor: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Page[Order]:
        """List orders by ascending id (keyset pagination).

        Args:
            filters: Optional status / created_at filters
            cursor: ``next_cursor`` from the previous page
            limit: Page size; defaulted and clamped by policy

        Returns:
            Page of orders
        """
        if cursor is not None and cursor < 0:
            raise ValidationError(f"Invalid cursor: {cursor}")

        async with create_uow(self._session_factory) as uow:
            return await uow.orders.find_page(
                filters or OrderFilters(), cursor, self._policy.clamp_limit(limit)
            )

    @property
    def policy(self) -> OrderPolicySettings:
        return self._policy
