"""
Async engine and session lifecycle for the durable itinerary store
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, text

from hangout_planner.core.exceptions import ConfigurationError
from hangout_planner.core.settings import Settings

logger = logging.getLogger(__name__)

# URL scheme -> async driver scheme
ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def to_async_url(database_url: str) -> str:
    """Rewrite a DB_URL to use an async driver; explicit drivers are kept."""
    if not database_url:
        raise ConfigurationError("DB_URL is required when STORAGE_BACKEND is 'database'")

    scheme, sep, rest = database_url.partition("://")
    if not sep or not scheme:
        raise ConfigurationError("Invalid database URL format")

    dialect = scheme.split("+", 1)[0]
    if dialect not in ASYNC_DRIVERS:
        raise ConfigurationError(f"Unsupported database scheme: {scheme}")
    if "+" in scheme:
        return database_url
    return f"{ASYNC_DRIVERS[dialect]}://{rest}"


class DatabaseManager:
    """Owns the async engine and session factory for one configured database"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.async_session: Optional[async_sessionmaker] = None
        self._stats = {
            "connections_opened": 0,
            "errors": 0,
            "last_health_check": None,
        }

    def _prepare_database_url(self) -> str:
        url = to_async_url(self.settings.DB_URL)
        parsed = urlparse(url)
        # never log credentials
        logger.info(f"Using database {parsed.scheme}://{parsed.hostname or ''}/{parsed.path.lstrip('/')}")
        return url

    def _create_engine(self) -> AsyncEngine:
        url = self._prepare_database_url()
        options: Dict[str, Any] = {"echo": self.settings.DB_ECHO, "pool_pre_ping": True}

        if url.startswith("postgresql"):
            options.update(
                pool_size=self.settings.DB_POOL_SIZE,
                max_overflow=self.settings.DB_MAX_OVERFLOW,
                pool_timeout=self.settings.DB_POOL_TIMEOUT,
                pool_recycle=self.settings.DB_POOL_RECYCLE,
            )

        engine = create_async_engine(url, **options)

        @event.listens_for(engine.sync_engine, "connect")
        def on_connect(dbapi_connection, connection_record):
            self._stats["connections_opened"] += 1

        @event.listens_for(engine.sync_engine, "handle_error")
        def on_error(exception_context):
            self._stats["errors"] += 1
            logger.error(f"Database error: {exception_context.original_exception}")

        return engine

    async def initialize(self) -> None:
        """Build the engine and session factory; an unreachable database is logged, not raised"""
        self.engine = self._create_engine()
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        health = await self.health_check()
        if health["status"] == "healthy":
            logger.info(f"Database ready ({self.engine.url.get_backend_name()})")
        else:
            logger.error(f"Database unreachable at startup: {health.get('error')}")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if not self.async_session:
            raise ConfigurationError("Database not configured")

        session = self.async_session()
        try:
            yield session
        except Exception as e:
            if isinstance(e, SQLAlchemyError):
                self._stats["errors"] += 1
                logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> Dict[str, Any]:
        started = time.time()
        self._stats["last_health_check"] = started
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e), "stats": self.get_connection_stats()}

        return {
            "status": "healthy",
            "response_time": f"{time.time() - started:.3f}s",
            "stats": self.get_connection_stats(),
        }

    async def init_db(self) -> None:
        """Create the users and itineraries tables if they do not exist"""
        if not self.engine:
            raise ConfigurationError("Database engine not initialized")

        import hangout_planner.db.models  # noqa: F401  registers tables

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ready")

    async def close(self) -> None:
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.async_session = None
            logger.info("Database connections closed")

    def get_connection_stats(self) -> Dict[str, Any]:
        return dict(self._stats)
