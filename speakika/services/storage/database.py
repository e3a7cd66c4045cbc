"""
Async SQLAlchemy engine ownership, sessions, and DB lifecycle helpers.

A ``Database`` is constructed explicitly (by the app factory or a test)
and handed to request handlers through an API dependency. Each
``session()`` yields an ``AsyncSession`` that commits on clean exit and
rolls back on error.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from speakika.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE fires in SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns one async engine and its session factory.

    Args:
        url: SQLAlchemy async connection URL.
        auth_token: Optional token forwarded to hosted libSQL drivers.
        engine: Pre-built engine (used in tests); ``url`` is ignored when given.
    """

    def __init__(
        self,
        url: str | None = None,
        auth_token: str = "",
        engine: AsyncEngine | None = None,
    ) -> None:
        if engine is None:
            if url is None:
                raise ValueError("Database needs either a url or an engine")
            connect_args = {"auth_token": auth_token} if auth_token else {}
            engine = create_async_engine(url, echo=False, connect_args=connect_args)
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        """Build a Database from application settings."""
        settings = settings or get_settings()
        return cls(url=settings.database_url, auth_token=settings.database_auth_token)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an ``AsyncSession`` that commits on success, rolls back on error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Run a trivial round-trip query; raises whatever the driver raises."""
        async with self.engine.connect() as conn:
            await conn.execute(text("select 1 as result"))

    async def create_all(self) -> None:
        """Create every table registered on ``Base`` (idempotent)."""
        url = self.engine.url
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
