"""Explicitly constructed forum context.

One ForumContext owns the connection pool and every component built on it.
The application creates it at startup and closes it at shutdown; tests
build an independent one per test.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from nobby.config import Settings
from nobby.database import Database, open_pool
from nobby.migrations import run_migrations
from nobby.services.accounts import AccountDirectory
from nobby.services.base import InternalError
from nobby.services.content import ContentStore
from nobby.services.mailer import LogMailer
from nobby.services.password_reset import PasswordResetManager
from nobby.services.sessions import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class ForumContext:
    settings: Settings
    database: Database
    content: ContentStore
    accounts: AccountDirectory
    sessions: SessionManager
    resets: PasswordResetManager
    mailer: LogMailer

    @classmethod
    def build(
        cls,
        settings: Settings,
        database: Database,
        mailer: LogMailer | None = None,
    ) -> "ForumContext":
        """Wire every component to ``database``."""
        return cls(
            settings=settings,
            database=database,
            content=ContentStore(database),
            accounts=AccountDirectory(
                database,
                secret=settings.secret_key,
                iterations=settings.password_iterations,
            ),
            sessions=SessionManager(database, ttl_seconds=settings.session_ttl_seconds),
            resets=PasswordResetManager(database, ttl_seconds=settings.reset_token_ttl_seconds),
            mailer=mailer or LogMailer(),
        )

    async def close(self) -> None:
        """Drain the connection pool."""
        await self.database.dispose()


async def open_forum(settings: Settings, mailer: LogMailer | None = None) -> ForumContext:
    """Open the pool, migrate the schema and prepare a ready-to-serve context.

    Raises:
        InternalError: If the database cannot be opened or migrated. The
            caller must not start serving.
    """
    database = open_pool(
        settings.database_path,
        settings.pool_size,
        timeout=settings.pool_timeout,
        echo=settings.debug,
    )
    try:
        await run_migrations(database)
        forum = ForumContext.build(settings, database, mailer=mailer)
        await forum.accounts.sync_counters()
        if await forum.content.seed_default_board() is not None:
            logger.info("Seeded default board")
    except SQLAlchemyError as exc:
        await database.dispose()
        raise InternalError(f"Database initialization failed: {exc}") from exc
    return forum
