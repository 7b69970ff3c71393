"""Database engine, session factory dan FastAPI dependency."""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.core.config import settings

logger = logging.getLogger(__name__)


def _create_engine():
    """Create async engine sesuai jenis database."""
    if settings.is_sqlite:
        # SQLite (testing / lokal) tidak mendukung connection pool biasa
        return create_async_engine(
            settings.DATABASE_URI,
            echo=settings.SQL_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )

    return create_async_engine(
        settings.DATABASE_URI,
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


engine = _create_engine()

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency untuk mendapatkan database session per request."""
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create semua tables yang terdaftar di SQLModel metadata."""
    # Import models agar semua table terdaftar di metadata
    import src.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")
