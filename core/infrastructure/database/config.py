"""
Database configuration.

Builds the async engine and session factory from ``DatabaseSettings``.
Nothing here is a module-level singleton: the application (or a test)
constructs one engine, derives a session factory from it and injects that
factory into the services that need it.
"""
import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.settings import DatabaseSettings


logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        settings: Database settings

    Returns:
        Configured async engine
    """
    url = make_url(settings.database_url)
    logger.info(f"Creating database engine: {url.render_as_string(hide_password=True)}")

    if url.get_backend_name() == "sqlite":
        engine = create_async_engine(
            url,
            echo=settings.echo_sql,
            connect_args={"timeout": settings.sqlite_busy_timeout},
        )
        _use_immediate_transactions(engine)
        return engine

    return create_async_engine(
        url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
        pool_pre_ping=True,  # Test connections before using
    )


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    Make every SQLite transaction take the database write lock up front.

    SQLite ignores FOR UPDATE; BEGIN IMMEDIATE gives the same serialization
    for writers, so two transactions can never both read a stock counter and
    then both act on it.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# =============================================================================
# SESSION FACTORY
# =============================================================================

def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create session factory bound to ``engine``.

    Returns:
        Session factory for creating sessions
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database(engine: AsyncEngine) -> None:
    """
    Initialize database.

    Creates all tables if they don't exist.
    """
    from core.data.models import Base

    logger.info("Initializing database...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized successfully")


async def close_database(engine: AsyncEngine) -> None:
    """Close database connections."""
    logger.info("Closing database connections...")
    await engine.dispose()
    logger.info("Database connections closed")
