"""
HTTP Customer Validator Implementation.

Asks the customers service whether a customer exists via its internal API.
"""
import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.application.interfaces import ICustomerValidator
from core.domain.exceptions import UpstreamUnavailableError
from core.settings import CustomersApiSettings


logger = logging.getLogger(__name__)


class HttpCustomerValidator(ICustomerValidator):
    """
    aiohttp implementation of the customer-existence check.

    Calls ``GET {base_url}/internal/customers/{id}`` with a bearer service
    token. Fails closed: anything other than a clear 200 or 404 raises
    ``UpstreamUnavailableError``.
    """

    def __init__(
        self,
        settings: CustomersApiSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize HTTP customer validator.

        Args:
            settings: Customers API settings (base URL, token, timeout)
            session: Shared client session; a short-lived one is opened per
                call when omitted
        """
        self.base_url = settings.base_url.rstrip("/")
        self.service_token = settings.service_token
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        self._session = session
        logger.info(f"HttpCustomerValidator initialized for {self.base_url}")

    async def exists(self, customer_id: int) -> bool:
        """Check that the customer exists and is not flagged inactive."""
        url = f"{self.base_url}/internal/customers/{customer_id}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.service_token}",
        }

        try:
            if self._session is not None:
                return await self._fetch(self._session, url, headers, customer_id)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._fetch(session, url, headers, customer_id)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Unable to reach Customers API: {e}", exc_info=True)
            raise UpstreamUnavailableError("Unable to reach Customers API") from e

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        headers: dict,
        customer_id: int,
    ) -> bool:
        async with session.get(url, headers=headers, timeout=self.timeout) as response:
            if response.status == 404:
                logger.info(f"Customer {customer_id} not found")
                return False

            if response.status != 200:
                error_text = await response.text()
                logger.error(f"Customers API error: {response.status} - {error_text}")
                raise UpstreamUnavailableError(
                    f"Customers API error: HTTP {response.status}"
                )

            payload = await response.json(content_type=None)
            active = _is_active(payload)
            if not active:
                logger.info(f"Customer {customer_id} is inactive")
            return active


def _is_active(payload: Any) -> bool:
    """Accept ``{"active": ...}`` at the top level or under ``data``."""
    if not isinstance(payload, dict):
        return True
    record = payload.get("data", payload)
    if isinstance(record, dict) and record.get("active") is False:
        return False
    return True
