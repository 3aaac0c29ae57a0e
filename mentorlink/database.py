# mentorlink/database.py
import logging
from functools import lru_cache
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import get_settings

logger = logging.getLogger(__name__)

def get_database_url():
    settings = get_settings()
    if settings.DATABASE_URL:
        return make_url(settings.DATABASE_URL)
    return URL.create(
        "postgresql+asyncpg",
        username=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD,
        host=settings.POSTGRES_HOST,
        port=settings.POSTGRES_PORT,
        database=settings.POSTGRES_DB,
    )

@lru_cache()
def get_engine() -> AsyncEngine:
    settings = get_settings()
    url = get_database_url()
    if url.get_backend_name() == "sqlite":
        # SQLite does not take the pooling options below
        return create_async_engine(url, echo=settings.DB_ECHO)
    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )

@lru_cache()
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded parties usable after a commit
    return async_sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)

# Base class for declarative models
Base = declarative_base()

# Dependency to get a DB session
async def get_db() -> AsyncIterator[AsyncSession]:
    """Provides a database session for a request and closes it afterwards."""
    session = get_sessionmaker()()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

async def create_db_and_tables(engine: AsyncEngine | None = None):
    """Creates all defined database tables."""
    # Import models so their tables are registered on Base.metadata
    from . import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created or already exist.")

async def check_database_health():
    """Check if database is accessible."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "database": f"error: {e}"}

async def dispose_engine():
    await get_engine().dispose()
