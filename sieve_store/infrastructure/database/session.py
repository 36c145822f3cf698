"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sieve_store.core.config import get_settings
from sieve_store.infrastructure.database.base import Base

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def _install_sqlite_begin(engine: AsyncEngine, begin_mode: str) -> None:
    """Take over transaction begin from the sqlite driver.

    pysqlite/aiosqlite only emit BEGIN before the first write, which leaves the
    reads of a read-then-write sequence outside the transaction. Emitting the
    BEGIN ourselves makes every session scope one database transaction, and
    ``BEGIN IMMEDIATE`` serializes concurrent writers on the database lock.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql(f"BEGIN {begin_mode}")


def engine_options(
    url: str,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` on the backend named by *url*.

    PostgreSQL runs at SERIALIZABLE: ``FOR UPDATE`` cannot lock rows another
    transaction is about to insert, so a quota check under READ COMMITTED could
    miss a concurrent new script. Conflicting transactions fail with a
    serialization error instead.
    """
    engine_kwargs: dict[str, Any] = {"echo": echo}
    if pool_size is not None:
        engine_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        engine_kwargs["max_overflow"] = max_overflow
    if make_url(url).get_backend_name() == "postgresql":
        engine_kwargs["isolation_level"] = "SERIALIZABLE"
    return engine_kwargs


def build_engine(
    url: str,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    sqlite_begin: str = "IMMEDIATE",
) -> AsyncEngine:
    engine = create_async_engine(
        url,
        **engine_options(url, echo=echo, pool_size=pool_size, max_overflow=max_overflow),
    )
    if engine.dialect.name == "sqlite":
        _install_sqlite_begin(engine, sqlite_begin)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine() -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(
            settings.database_url,
            echo=settings.database.echo or settings.debug,
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
            sqlite_begin=settings.database.sqlite_begin,
        )
        AsyncSessionFactory = create_session_factory(_engine)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if AsyncSessionFactory is None:
        get_engine()

    assert AsyncSessionFactory is not None  # for mypy
    return AsyncSessionFactory


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """Yield a session that is committed on success and rolled back on any error."""
    factory = factory or get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create database tables in development mode (migrations preferred)."""
    # 延迟导入模型，避免循环依赖
    from sieve_store.db import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    AsyncSessionFactory = None
