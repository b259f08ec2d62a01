"""FastAPI dependencies for dependency injection.

Services are built per request from the handles stored on ``app.state``
by ``apps.api.main.create_app``; nothing here holds a global pool.
"""

from pathlib import Path

from dotenv import load_dotenv
from fastapi import Request

from core.application.services import OrderTransactionEngine, ProductCatalogService

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")


def get_order_engine(request: Request) -> OrderTransactionEngine:
    """Get OrderTransactionEngine instance.

    Returns:
        OrderTransactionEngine instance
    """
    state = request.app.state
    return OrderTransactionEngine(
        session_factory=state.session_factory,
        customer_validator=state.customer_validator,
        policy=state.settings.orders,
    )


def get_product_service(request: Request) -> ProductCatalogService:
    """Get ProductCatalogService instance.

    Returns:
        ProductCatalogService instance
    """
    state = request.app.state
    return ProductCatalogService(
        session_factory=state.session_factory,
        policy=state.settings.orders,
    )
