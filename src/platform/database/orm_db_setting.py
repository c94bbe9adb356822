"""
SQLAlchemy async engine and session management with read-write separation

- Write operations always use the primary database
- Read operations use POSTGRES_REPLICA_SERVER when configured, otherwise the primary
- Inside a Unit of Work every repository shares the write session
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import orjson
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def _json_dumps(obj: object) -> str:
    return orjson.dumps(obj).decode()


class AsyncEngineManager:
    """
    Keeps one write engine and one read engine per running event loop.

    Engines bound to a previous loop (pytest-asyncio creates one per test) are dropped
    to avoid "Task got Future attached to a different loop" errors.
    """

    def __init__(self):
        self._write_engine: Optional[AsyncEngine] = None
        self._read_engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._write_session_maker: Optional[async_sessionmaker[AsyncSession]] = None
        self._read_session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self, *, read_only: bool = False) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if current_loop is not None and self._loop is not current_loop:
            if self._write_engine is not None or self._read_engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, dropping old engines')
            self._write_engine = None
            self._read_engine = None
            self._write_session_maker = None
            self._read_session_maker = None
            self._loop = current_loop

        if read_only:
            if self._read_engine is None:
                self._read_engine = self._create_engine(
                    url=settings.DATABASE_READ_URL_ASYNC, pool_size=settings.DB_POOL_SIZE_READ
                )
            return self._read_engine

        if self._write_engine is None:
            Logger.base.info('🔗 [DB] Creating write engine')
            self._write_engine = self._create_engine(
                url=settings.DATABASE_URL_ASYNC, pool_size=settings.DB_POOL_SIZE_WRITE
            )
        return self._write_engine

    def get_session_maker(self, *, read_only: bool = False) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine(read_only=read_only)

        if read_only:
            if self._read_session_maker is None:
                self._read_session_maker = async_sessionmaker(
                    engine, class_=AsyncSession, expire_on_commit=False
                )
            return self._read_session_maker

        if self._write_session_maker is None:
            self._write_session_maker = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._write_session_maker

    async def dispose(self) -> None:
        for engine in (self._write_engine, self._read_engine):
            if engine is not None:
                await engine.dispose()
        self._write_engine = None
        self._read_engine = None
        self._write_session_maker = None
        self._read_session_maker = None

    @staticmethod
    def _create_engine(*, url: str, pool_size: int) -> AsyncEngine:
        return create_async_engine(
            url,
            echo=False,
            pool_size=pool_size,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
            # JSONB columns (meta, follow-up payloads)
            json_serializer=_json_dumps,
            json_deserializer=orjson.loads,
        )


_engine_manager = AsyncEngineManager()


def get_engine(*, read_only: bool = False) -> AsyncEngine:
    return _engine_manager.get_engine(read_only=read_only)


def get_session_maker(*, read_only: bool = False) -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker(read_only=read_only)


async def dispose_engines() -> None:
    await _engine_manager.dispose()


class Base(DeclarativeBase):
    pass


async def create_db_and_tables():
    """Create database tables if they don't exist"""
    # Import models so they register on Base.metadata
    import src.service.commerce.driven_adapter.model  # noqa: F401

    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception as e:
        error_msg = str(e).lower()
        if any(
            keyword in error_msg
            for keyword in ['already exists', 'duplicate key', 'unique constraint']
        ):
            Logger.base.info('Tables already exist, skipping creation')
        else:
            Logger.base.error(f'Error creating tables: {e}')
            raise


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: write session, closed (and rolled back if needed) on exit."""
    session_maker = get_session_maker(read_only=False)
    async with session_maker() as session:
        yield session


async def get_async_read_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: read session from the replica (or primary as fallback)."""
    session_maker = get_session_maker(read_only=True)
    async with session_maker() as session:
        yield session


class Database:
    """Session source for code running outside a request (background tasks, DI singletons)."""

    def __init__(self, *, read_only: bool = False) -> None:
        self._read_only = read_only

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session_maker = get_session_maker(read_only=self._read_only)
        async with session_maker() as session:
            yield session
