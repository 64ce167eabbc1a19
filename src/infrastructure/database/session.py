"""Database session management."""

from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings


def enable_sqlite_write_locking(engine: AsyncEngine) -> None:
    """Start every SQLite transaction with ``BEGIN IMMEDIATE``.

    The sqlite3 driver defers BEGIN until the first write and SQLite ignores
    ``FOR UPDATE``, so without this a snapshot read holds no lock and another
    connection can commit between the read and the diff being written.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


_engine_kwargs: dict[str, Any] = {}
if settings.async_database_url.startswith("postgresql"):
    # Concurrent reorders of the same owner's list must not both commit
    # diffs computed from one snapshot.
    _engine_kwargs["isolation_level"] = settings.db_isolation_level

# Create async engine
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    **_engine_kwargs,
)
if engine.dialect.name == "sqlite":
    enable_sqlite_write_locking(engine)

# Create async session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
