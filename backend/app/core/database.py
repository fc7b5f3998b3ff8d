"""
Async database engine lifecycle and session dependency for the API.

The engine is owned by a ``Database`` instance that is opened on application
startup and disposed on shutdown; request handlers receive sessions through
the ``get_db`` dependency.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Request
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a session is requested before ``Database.connect``."""


class Database:
    """
    Holder for the async engine and its session factory.

    Pool bounds come from settings; ``connect`` and ``disconnect`` are
    called from the FastAPI lifespan.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = settings.DATABASE_POOL_SIZE,
        max_overflow: int = settings.DATABASE_MAX_OVERFLOW,
        echo: bool = False,
    ) -> None:
        self._url = url
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotInitializedError("Database engine not started")
        return self._engine

    def connect(self) -> None:
        if self._engine is not None:
            return
        engine_kwargs: dict = {"echo": self._echo, "pool_pre_ping": True}
        if not self._url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
            )
        self._engine = create_async_engine(self._url, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
            autoflush=False,
        )

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise DatabaseNotInitializedError("Database engine not started")
        return self._sessionmaker()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session bound to the app's Database.

    Rolls back on unhandled errors; committing is the handler's job.
    """
    database: Database = request.app.state.database
    session = database.session()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
