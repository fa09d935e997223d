"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine + session maker
2. Base: declarative base for every ORM model
3. Database: session provider used through dependency injection

Backends:
- PostgreSQL (asyncpg) in production; row-level locks serialize the
  conditional counter / status updates.
- SQLite (aiosqlite) for local runs and tests; every transaction is opened
  with BEGIN IMMEDIATE so concurrent units of work serialize on the write lock
  instead of failing with "database is locked" on upgrade.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def _is_sqlite(url: str) -> bool:
    return url.startswith('sqlite')


def _enable_sqlite_immediate_transactions(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, 'connect')
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Disable the driver's own BEGIN so ours is the only one emitted
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, 'begin')
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN IMMEDIATE')


def build_engine(url: str) -> AsyncEngine:
    if _is_sqlite(url):
        engine = create_async_engine(url, echo=False, connect_args={'timeout': 30})
        _enable_sqlite_immediate_transactions(engine)
        return engine

    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=settings.DB_POOL_PRE_PING,
    )


# =============================================================================
# Event-loop-aware Engine Manager
# =============================================================================


class AsyncEngineManager:
    """
    Manages the SQLAlchemy async engine with event loop awareness.

    Ensures the engine is always bound to the current event loop to prevent
    "Task got Future attached to a different loop" errors (TestClient and the
    scheduler entrypoint each run their own loop).
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = build_engine(self.url)
            self._session_maker = None
            self._loop = current_loop

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

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None


# Global engine manager
_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


async def dispose_engine() -> None:
    await _engine_manager.dispose()


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    pass


# =============================================================================
# Table Creation
# =============================================================================


async def create_db_and_tables(engine: AsyncEngine | None = None) -> None:
    """Create database tables if they don't exist"""
    # Register every model on Base.metadata
    import src.service.event_booking.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    try:
        async with current_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception as e:
        error_msg = str(e).lower()
        if any(keyword in error_msg for keyword in ['already exists', 'duplicate key']):
            Logger.base.info('Tables already exist, skipping creation')
        else:
            Logger.base.error(f'Error creating tables: {e}')
            raise


# =============================================================================
# Database Class (for DI)
# =============================================================================


class Database:
    """
    Session provider for dependency injection

    Each call to session() opens an independent AsyncSession; one session
    backs exactly one unit of work.
    """

    def __init__(self, engine_manager: AsyncEngineManager | None = None) -> None:
        self._engine_manager = engine_manager or _engine_manager

    @property
    def engine_manager(self) -> AsyncEngineManager:
        return self._engine_manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for database sessions (rolls back on exception)"""
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session
