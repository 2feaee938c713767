"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from fastapi import Request
import logging

from .config import Settings

logger = logging.getLogger(__name__)

class Database:
    """
    Owns the async engine and session factory for one application instance.

    Created by the application factory, opened during startup and disposed
    at shutdown. Request handlers receive sessions through ``get_db``.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.url = settings.database_url_async
        self.engine: AsyncEngine = self._create_engine()
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def _create_engine(self) -> AsyncEngine:
        if self.is_sqlite:
            # SQLite doesn't support connection pooling parameters
            return create_async_engine(
                self.url,
                echo=self.settings.DATABASE_ECHO,
                poolclass=NullPool,
            )
        # PostgreSQL and other databases support pooling
        return create_async_engine(
            self.url,
            echo=self.settings.DATABASE_ECHO,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,  # Verify connections before use
        )

    async def create_all(self) -> None:
        """Create tables for every registered model"""
        from wishlist_app.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {str(e)}")
            return False

    async def close(self) -> None:
        """Close database connections"""
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions
        Commits on success, rolls back on any error
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

def get_database(request: Request) -> Database:
    return request.app.state.db

# Database dependency
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Ensures proper cleanup after use
    """
    async with get_database(request).session() as session:
        yield session
