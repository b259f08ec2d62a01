"""Static mappers for domain entities ↔ database models."""

from datetime import datetime, timezone
from typing import Optional

from core.domain.entities import IdempotencyKey, Order, OrderItem, Product
from core.domain.enums import IdempotencyStatus, OrderStatus

from .models import IdempotencyKeyModel, OrderItemModel, OrderModel, ProductModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite drops tzinfo on the way back)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a bound or stored timestamp to UTC; naive values are taken as UTC.

    SQLite keeps only the wall-clock text, so every value must reach it in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderItem:
        """Convert ORM model to domain entity.

        Expects ``model.product`` to be eagerly loaded.

        Args:
            model: OrderItemModel instance

        Returns:
            OrderItem domain entity
        """
        return OrderItem(
            id=model.id,
            product_id=model.product_id,
            qty=model.qty,
            unit_price_cents=model.unit_price_cents,
            subtotal_cents=model.subtotal_cents,
            product_name=model.product.name if model.product is not None else None,
        )

    @staticmethod
    def to_persistence(entity: OrderItem) -> OrderItemModel:
        """Convert domain entity to ORM model.

        Args:
            entity: OrderItem domain entity

        Returns:
            OrderItemModel instance
        """
        return OrderItemModel(
            product_id=entity.product_id,
            qty=entity.qty,
            unit_price_cents=entity.unit_price_cents,
            subtotal_cents=entity.subtotal_cents,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Args:
            model: OrderModel instance

        Returns:
            Order domain aggregate
        """
        return Order(
            id=model.id,
            customer_id=model.customer_id,
            status=OrderStatus(model.status),
            total_cents=model.total_cents,
            created_at=as_utc(model.created_at),
            items=[OrderItemMapper.to_domain(item_model) for item_model in model.items],
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert domain aggregate to ORM model (with nested items).

        Args:
            entity: Order domain aggregate

        Returns:
            OrderModel instance
        """
        order_model = OrderModel(
            customer_id=entity.customer_id,
            status=entity.status.value,
            total_cents=entity.total_cents,
            created_at=to_utc(entity.created_at),
        )
        order_model.items = [OrderItemMapper.to_persistence(item) for item in entity.items]
        return order_model


class ProductMapper:
    """Static mapper for Product ↔ ProductModel transformation."""

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            sku=model.sku,
            name=model.name,
            price_cents=model.price_cents,
            stock=model.stock,
            created_at=as_utc(model.created_at),
        )

    @staticmethod
    def to_persistence(entity: Product) -> ProductModel:
        return ProductModel(
            sku=entity.sku,
            name=entity.name,
            price_cents=entity.price_cents,
            stock=entity.stock,
        )


class IdempotencyKeyMapper:
    """Static mapper for IdempotencyKey ↔ IdempotencyKeyModel transformation."""

    @staticmethod
    def to_domain(model: IdempotencyKeyModel) -> IdempotencyKey:
        return IdempotencyKey(
            key_value=model.key_value,
            target_type=model.target_type,
            target_id=model.target_id,
            status=IdempotencyStatus(model.status),
            response_body=model.response_body,
            expires_at=as_utc(model.expires_at),
        )
