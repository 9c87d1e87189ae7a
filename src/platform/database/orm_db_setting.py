"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine and session maker per database URL
2. Base: declarative base shared by all ORM models
3. Database: DI-friendly facade exposing session() and create_tables()

PostgreSQL (asyncpg) is the production target. SQLite (aiosqlite) is accepted
for local runs and tests; pool sizing and server settings only apply to asyncpg.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.exception.storage_error import translate_storage_error
from src.platform.logging.loguru_io import Logger


# =============================================================================
# Event-loop-aware Engine Manager
# =============================================================================


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class AsyncEngineManager:
    """
    Manages a SQLAlchemy async engine with event loop awareness.

    Ensures the engine is always bound to the current event loop to prevent
    "Task got Future attached to a different loop" errors (TestClient runs the
    app in its own loop).
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self._url).get_backend_name() == 'sqlite'

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, disposing old engine...')
                # Can't await dispose() from a sync method; the old engine is garbage collected
                self._engine = None
                self._session_maker = None

            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        assert self._engine is not None
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    def _create_engine(self) -> AsyncEngine:
        if self.is_sqlite:
            # SQLite serializes writers; wait on the file lock instead of failing fast
            engine = create_async_engine(
                self._url,
                echo=False,
                connect_args={'timeout': settings.DB_COMMAND_TIMEOUT_SECONDS},
            )
            event.listen(engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
            return engine

        return create_async_engine(
            self._url,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
            connect_args={
                'command_timeout': settings.DB_COMMAND_TIMEOUT_SECONDS,
                'server_settings': {
                    'statement_timeout': str(settings.DB_STATEMENT_TIMEOUT_MS),
                    'lock_timeout': str(settings.DB_STATEMENT_TIMEOUT_MS),
                },
            },
        )

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            self._loop = None


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    pass


# =============================================================================
# Database Class (for DI)
# =============================================================================


class Database:
    """
    Database facade for the dependency injection container.

    Each instance owns its engine manager, so tests can point a container at
    a throwaway SQLite file without touching process-wide state.
    """

    def __init__(self, *, url: Optional[str] = None) -> None:
        self._engine_manager = AsyncEngineManager(url or settings.DATABASE_URL_ASYNC)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine_manager.get_engine()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Rolls back on exception and re-raises storage failures as domain errors.
        """
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                if (translated := translate_storage_error(e)) is not None:
                    raise translated from e
                raise

    async def create_tables(self) -> None:
        """Create database tables if they don't exist"""
        # Import models so they register on Base.metadata
        import src.service.park_ticketing.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️  [DB] Tables ensured')

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
