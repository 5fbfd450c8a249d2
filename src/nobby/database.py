"""Database connection pool with async SQLAlchemy support."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool

logger = logging.getLogger(__name__)

# Seconds SQLite waits on a locked database before raising.
BUSY_TIMEOUT_SECONDS = 15


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Database:
    """A bounded pool of connections to one SQLite file.

    Every store borrows a session for the duration of one operation or
    transaction; the session hands its connection back to the pool when the
    block exits, whether it succeeded or not.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.sessionmaker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Borrow a connection for read-only work."""
        async with self.sessionmaker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Borrow a connection and run the block in one transaction.

        Commits when the block exits normally and rolls back when it raises.
        """
        async with self.sessionmaker() as session:
            async with session.begin():
                yield session

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database pool drained")


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def open_pool(
    path: str | Path,
    size: int,
    timeout: float = 30.0,
    echo: bool = False,
) -> Database:
    """Open a pool of ``size`` connections against the SQLite file at ``path``.

    Args:
        path: Database file path. Created on first connection if missing.
        size: Number of pooled connections. Borrowers wait once all are in use.
        timeout: Seconds to wait for a free connection before failing.
        echo: Log every SQL statement.

    Returns:
        A Database wrapping the pooled engine.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{path}",
        echo=echo,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=size,
        max_overflow=0,
        pool_timeout=timeout,
        connect_args={"timeout": BUSY_TIMEOUT_SECONDS},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    logger.info("Opened database pool at %s (size=%d)", path, size)
    return Database(engine)
