"""Application layer interfaces."""
from abc import ABC, abstractmethod


class ICustomerValidator(ABC):
    """
    Interface for the customer-existence check.

    The customers service is a separate system; the order engine only asks
    whether a customer exists and is active before it opens a transaction.
    """

    @abstractmethod
    async def exists(self, customer_id: int) -> bool:
        """
        Check that a customer exists and is active.

        Args:
            customer_id: Customer identifier

        Returns:
            True if the customer exists and is active, False otherwise

        Raises:
            UpstreamUnavailableError: If the customers service cannot answer
        """
        pass


__all__ = ["ICustomerValidator"]
