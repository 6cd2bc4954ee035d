import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Database:
    """
    Owns the async engine and session factory.

    The engine is created lazily on the first ``connect()`` call. Concurrent
    first callers wait on the same lock, so only one engine (and one optional
    ``create_all`` pass) is ever made. Later calls return the cached factory.
    """

    def __init__(self, url: str, create_tables: bool = False, **engine_options):
        self.url = url
        self.create_tables = create_tables
        self.engine_options = engine_options
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    async def connect(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is not None:
            return self._session_maker

        async with self._lock:
            if self._session_maker is None:
                engine = create_async_engine(self.url, **self.engine_options)
                if self.create_tables:
                    async with engine.begin() as conn:
                        await conn.run_sync(Base.metadata.create_all)
                self._engine = engine
                self._session_maker = async_sessionmaker(
                    engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
                logger.info("Database engine initialised")
        return self._session_maker

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session_maker = await self.connect()
        async with session_maker() as session:
            yield session

    async def ping(self) -> bool:
        try:
            session_maker = await self.connect()
            async with session_maker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Database ping failed", exc_info=True)
            return False

    async def dispose(self) -> None:
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                logger.info("Database engine disposed")
            self._engine = None
            self._session_maker = None


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting an async database session."""
    async for session in database.session():
        yield session


async def check_db_connection(database: Database) -> bool:
    return await database.ping()
