"""
Database configuration and session management.

Provides:
- Async engine for the token store
- AsyncSessionLocal factory
- get_async_db_context() for the auth service
- init_db() to create tables at startup
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

if "sqlite" in settings.database_url.lower():
    async_engine = create_async_engine(
        settings.database_url,
        echo=settings.log_level == "DEBUG",
    )
else:
    async_engine = create_async_engine(
        settings.database_url,
        pool_size=5,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
    )

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


@asynccontextmanager
async def get_async_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions outside FastAPI.

    Usage:
        async with get_async_db_context() as session:
            token = await get_user_token(session, chat_id)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db() -> None:
    """Create all tables if they do not exist."""
    from src.models.base import Base
    import src.models.tokens  # noqa: F401  registers UserToken

    _ensure_sqlite_directory(settings.database_url)

    logger.info("Creating database tables...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")
