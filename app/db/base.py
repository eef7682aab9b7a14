"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration
- The Database handle owning the engine and session factory
- Table creation
- Health check functionality
"""

from typing import AsyncGenerator, Dict, Optional
import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

# Import models so that they are registered with SQLModel metadata
import app.models  # noqa: F401
from app.core.config import Settings, EnvironmentType

logger = logging.getLogger(__name__)


def get_engine_config(settings: Settings) -> Dict:
    """Get the appropriate engine configuration based on the environment.

    Returns:
        Dict: Engine configuration parameters for the current environment.
    """
    if settings.ENVIRONMENT == EnvironmentType.TESTING:
        # Use NullPool for tests to avoid connection issues
        return {"echo": False, "poolclass": NullPool}

    if settings.DATABASE_URL.startswith("sqlite"):
        # SQLite drivers do not accept queue pool sizing arguments
        return {"echo": settings.DB_ECHO}

    return {
        "echo": settings.DB_ECHO,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def get_engine(settings: Settings) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_config = get_engine_config(settings)
    logger.info(f"Creating database engine for {settings.ENVIRONMENT.value} environment")
    return create_async_engine(settings.DATABASE_URL, **engine_config)


class Database:
    """Handle on the record store connection.

    Owns the engine and the session factory. One instance is created per
    application and passed to request handlers through ``app.state``.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(get_engine(settings))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async session with proper error handling and cleanup.

        Yields:
            AsyncSession: SQLAlchemy async session
        """
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create the url_records and url_counters tables if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def check_connection(self) -> Dict:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message: Optional[str] = None
        latency_ms = 0

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = str(e)
            logger.error(f"Database health check failed: {e}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }

    async def dispose(self) -> None:
        await self.engine.dispose()
