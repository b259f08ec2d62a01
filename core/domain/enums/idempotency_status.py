"""
Idempotency Status Enum.

Per-key states: PENDING -> COMPLETED | FAILED, terminal thereafter.
"""
from enum import Enum


class IdempotencyStatus(str, Enum):
    """Idempotency key status values."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not IdempotencyStatus.PENDING
