"""
Database Management and Configuration.

This module sets up and manages the asynchronous database connection for the
DevConnector API. It uses SQLAlchemy with `asyncio` support and SQLModel for
data modeling.

Key Components:
- `init_engine`: Creates the async engine and session factory for a database
  URL. Called from the application lifespan so each application instance (and
  each test client) gets an engine bound to its own event loop.
- `create_db_and_tables`: Creates all tables from the SQLModel metadata.
- `get_session`: FastAPI dependency that yields one session per request.
- `dispose_engine`: Closes pooled connections on shutdown.
- `get_database_info`: Diagnostic information for the health endpoints.

Architectural Design:
- Asynchronous Operations: `aiosqlite` for SQLite and any async driver for
  other databases, so request handlers never block the event loop on I/O.
- Dependency Injection: Endpoints receive sessions through `get_session`,
  which keeps them easy to test.
"""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from core.logging_config import get_logger

# Registers the tables on SQLModel.metadata
import core.models  # noqa: F401

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None
_database_url: Optional[str] = None


def init_engine(database_url: str) -> AsyncEngine:
    """Create the async engine and session factory"""
    global _engine, _session_factory, _database_url

    if database_url.startswith("sqlite"):
        # In-memory SQLite only exists for the lifetime of one connection
        poolclass = StaticPool if ":memory:" in database_url else AsyncAdaptedQueuePool
        engine = create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
            poolclass=poolclass,
        )
    else:
        engine = create_async_engine(
            database_url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            echo=False,
        )

    _engine = engine
    _database_url = database_url
    _session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    logger.info(f"Database engine created for {_mask_url(database_url)}")
    return engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database engine is not initialized; call init_engine first")
    return _engine


def get_session_factory() -> async_sessionmaker:
    if _session_factory is None:
        raise RuntimeError("Database engine is not initialized; call init_engine first")
    return _session_factory


async def create_db_and_tables():
    """
    Initialize the database and create all tables.
    Called during application startup.
    """
    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("DevConnector database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create DevConnector database tables: {e}")
        raise


async def dispose_engine():
    """Close all pooled connections"""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get an async database session for dependency injection.
    """
    async with get_session_factory()() as session:
        yield session


async def get_database_info() -> Dict[str, Any]:
    """
    Get basic database information for health checks.
    """
    url = _database_url or ""
    try:
        async with get_session_factory()() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            connection_healthy = True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        connection_healthy = False

    return {
        "database_url": _mask_url(url),
        "connection_healthy": connection_healthy,
        "database_type": "sqlite" if url.startswith("sqlite") else url.split(":")[0],
    }


def _mask_url(url: str) -> str:
    # Hide credentials
    return url.split("@")[1] if "@" in url else url
