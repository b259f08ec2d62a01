"""Repository interface for idempotency keys."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Tuple

from ..entities.idempotency_key import IdempotencyKey


class IdempotencyRepository(ABC):
    """Keyed store of at-most-once operation outcomes."""

    @abstractmethod
    async def register_or_fetch(
        self,
        key_value: str,
        target_type: str,
        target_id: int,
        expires_at: datetime,
    ) -> Tuple[IdempotencyKey, bool]:
        """Atomically insert a PENDING key unless one already exists.

        The first writer wins; later callers get the stored row unchanged.

        Returns:
            (stored key, True if this call created it)
        """
        pass

    @abstractmethod
    async def complete(self, key_value: str, response_body: str, expires_at: datetime) -> bool:
        """Move a PENDING key to COMPLETED, caching the response.

        Returns:
            True if the key was PENDING and is now COMPLETED
        """
        pass

    @abstractmethod
    async def fail(self, key_value: str, response_body: str) -> bool:
        """Move a PENDING key to FAILED, caching the error.

        Returns:
            True if the key was PENDING and is now FAILED
        """
        pass
