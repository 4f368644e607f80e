"""Core classes and mixins for DB connections"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, cast
from typing import Callable, AsyncContextManager

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from components.core import config

settings = config.get_settings()
Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        """Engine is created on first use so importing the app never connects."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        url = settings.async_db_url
        if url.startswith("sqlite"):
            return create_async_engine(url, echo=False)
        return create_async_engine(
            url,
            echo=False,  # Set to True for SQL query logging
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=5,  # Connection pool size
            max_overflow=10,  # Maximum number of connections that can be created beyond pool_size
        )

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        return cast(
            SessionMaker,
            sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autocommit=False,
                autoflush=False,
            ),
        )

    async def create_all(self) -> None:
        """Create all tables known to the declarative base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def get_db(self) -> AsyncIterator[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()
