"""
B2B Orders - Main FastAPI Application.

REST surface over the order transaction engine and the product catalog.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import ICustomerValidator
from core.domain.exceptions import (
    BusinessRuleError,
    ConcurrencyError,
    NotFoundError,
    OrderEngineError,
    UpstreamError,
    ValidationError,
)
from core.infrastructure.adapters.customers import HttpCustomerValidator
from core.infrastructure.database.config import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
)
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings, get_app_settings

from apps.api.v1.endpoints import orders, products


logger = logging.getLogger(__name__)


# =============================================================================
# ERROR MAPPING
# =============================================================================

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (BusinessRuleError, status.HTTP_409_CONFLICT),
    (ConcurrencyError, status.HTTP_409_CONFLICT),
    (UpstreamError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: OrderEngineError) -> int:
    """Map an engine error (or a replay of one) to an HTTP status."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# =============================================================================
# APP FACTORY
# =============================================================================

def create_app(
    settings: Optional[AppSettings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    customer_validator: Optional[ICustomerValidator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Injected collaborators are attached immediately; anything missing is
    created from settings on startup and released on shutdown.

    Args:
        settings: Application settings (environment when omitted)
        session_factory: Ready session factory (tests)
        customer_validator: Customer check (tests)
    """
    settings = settings or get_app_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("B2B Orders API starting up...")
        engine = None
        http_session = None

        if app.state.session_factory is None:
            engine = create_engine(settings.database)
            await init_database(engine)
            app.state.session_factory = create_session_factory(engine)

        if app.state.customer_validator is None:
            http_session = aiohttp.ClientSession()
            app.state.customer_validator = HttpCustomerValidator(
                settings.customers, session=http_session
            )

        try:
            yield
        finally:
            logger.info("B2B Orders API shutting down...")
            if http_session is not None:
                await http_session.close()
            if engine is not None:
                await close_database(engine)

    app = FastAPI(
        title="B2B Orders API",
        description="Transactional order placement, confirmation and cancellation.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.customer_validator = customer_validator

    # -------------------------------------------------------------------------
    # REQUEST LOGGING MIDDLEWARE
    # -------------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing."""
        start_time = time.time()
        logger.info(f"→ {request.method} {request.url.path}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"← {request.method} {request.url.path} "
            f"[{response.status_code}] ({duration:.3f}s)"
        )
        return response

    # -------------------------------------------------------------------------
    # EXCEPTION HANDLERS
    # -------------------------------------------------------------------------

    @app.exception_handler(OrderEngineError)
    async def order_engine_error_handler(request: Request, exc: OrderEngineError) -> JSONResponse:
        """Translate engine errors into their HTTP status with a stable code."""
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.code} on {request.url.path}: {exc.message}")

        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed request payloads like engine validation errors."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request",
                "code": ValidationError.code,
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "path": request.url.path},
        )

    # -------------------------------------------------------------------------
    # ROUTERS
    # -------------------------------------------------------------------------

    app.include_router(orders.router, prefix="/api/v1")
    app.include_router(products.router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    uvicorn.run(app, host="0.0.0.0", port=8000)
