import asyncio
import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from quiz_contest.core.config import settings
from quiz_contest.models import Base  # registers every table on the metadata


logger = logging.getLogger(__name__)


_engine: AsyncEngine | None = None
_SessionLocal: async_sessionmaker[AsyncSession] | None = None


def to_async_url(dsn: str) -> str:
    # postgresql://... -> postgresql+asyncpg://...
    if dsn.startswith("postgres://"):
        dsn = dsn.replace("postgres://", "postgresql://", 1)
    if dsn.startswith("postgresql://"):
        return dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
    return dsn


def init_engine_if_needed() -> AsyncEngine:
    """Create the engine and session factory once (lazily)."""
    global _engine, _SessionLocal
    if _engine is not None and _SessionLocal is not None:
        return _engine

    _engine = create_async_engine(
        to_async_url(settings.DATABASE_URL),
        pool_pre_ping=True,
    )
    _SessionLocal = async_sessionmaker(
        _engine, expire_on_commit=False, autoflush=False
    )
    logger.info("SQLAlchemy async engine initialized")
    return _engine


async def wait_for_database(attempts: int = 30, delay: float = 1.0) -> None:
    engine = init_engine_if_needed()

    last_err: Exception | None = None
    for attempt in range(attempts):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Connected to the data store")
            return
        except Exception as e:
            last_err = e
            logger.warning("Data store not ready (%s). Retry %d/%d...", e, attempt + 1, attempts)
            await asyncio.sleep(delay)

    logger.error("Failed to connect to the data store after retries: %s", last_err)
    assert last_err is not None
    raise last_err


async def create_schema() -> None:
    engine = init_engine_if_needed()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema created (if missing)")


async def dispose_engine() -> None:
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _SessionLocal = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession and closes it afterwards."""
    if _SessionLocal is None:
        init_engine_if_needed()
    assert _SessionLocal is not None
    async with _SessionLocal() as session:
        yield session
