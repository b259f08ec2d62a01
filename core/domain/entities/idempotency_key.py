"""Idempotency key entity."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import IdempotencyStatus


@dataclass
class IdempotencyKey:
    """
    Recorded outcome of an at-most-once operation.

    The (target_type, target_id) pair is fixed when the key is first
    registered; any later use of the same key must name the same target.
    """
    key_value: str
    target_type: str
    target_id: int
    status: IdempotencyStatus
    expires_at: datetime
    response_body: Optional[str] = None

    def targets(self, target_type: str, target_id: int) -> bool:
        return self.target_type == target_type and self.target_id == target_id
