"""SQLAlchemy ORM model for idempotency keys."""

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func

from .base import Base


class IdempotencyKeyModel(Base):
    """
    Idempotency key database model.

    ``key_value`` is globally unique; it backs the atomic insert-if-absent
    used to register keys. Rows past ``expires_at`` are removed by an
    external janitor.
    """

    __tablename__ = "idempotency_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key_value = Column(String(255), unique=True, nullable=False)
    target_type = Column(String(50), nullable=False)
    target_id = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    response_body = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_idempotency_keys_expires_at", "expires_at"),
    )

    def __repr__(self):
        return f"<IdempotencyKeyModel(key={self.key_value}, status={self.status})>"
