"""Async database engine, session factory and per-operation transactions."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from liftlog.core.config import Settings, get_settings
from liftlog.core.exceptions import StorageError

logger = logging.getLogger(__name__)


def _enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """Foreign keys on, and let SQLAlchemy emit BEGIN so SAVEPOINT works."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    if settings.is_sqlite:
        engine = create_async_engine(settings.database_url, echo=settings.debug)
        _enable_sqlite_transactions(engine)
        return engine
    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.debug,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine_from_settings(get_settings())
async_session_maker = create_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(db: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """Run one core operation all-or-nothing inside a SAVEPOINT.

    Store failures roll back every write made inside the block and surface as
    a single StorageError. Domain errors roll back too and propagate as-is.
    """
    try:
        async with db.begin_nested():
            yield db
    except SQLAlchemyError as exc:
        logger.exception("Failed to %s", action)
        raise StorageError(f"Failed to {action}") from exc
