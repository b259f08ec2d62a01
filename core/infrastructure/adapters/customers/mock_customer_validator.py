"""
Mock Customer Validator Implementation.

In-memory implementation for tests and local development.
"""
import logging
from typing import Iterable, Optional, Set

from core.application.interfaces import ICustomerValidator
from core.domain.exceptions import UpstreamUnavailableError


logger = logging.getLogger(__name__)


class MockCustomerValidator(ICustomerValidator):
    """
    In-memory customer directory.

    ``known_ids=None`` accepts every customer. Set ``unavailable`` to make
    every call fail like an unreachable service.
    """

    def __init__(self, known_ids: Optional[Iterable[int]] = None):
        self._known: Optional[Set[int]] = set(known_ids) if known_ids is not None else None
        self.unavailable = False
        self.calls: list[int] = []
        logger.info("MockCustomerValidator initialized (in-memory directory)")

    async def exists(self, customer_id: int) -> bool:
        self.calls.append(customer_id)
        if self.unavailable:
            raise UpstreamUnavailableError("Unable to reach Customers API")
        if self._known is None:
            return True
        return customer_id in self._known

    def add(self, customer_id: int) -> None:
        if self._known is None:
            self._known = set()
        self._known.add(customer_id)

    def remove(self, customer_id: int) -> None:
        if self._known is not None:
            self._known.discard(customer_id)
