"""Apply the versioned migration list to a database."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import sqlalchemy as sa
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Connection

from nobby.database import Database
from nobby.migrations.helpers import has_table
from nobby.migrations.versions import (
    v0001_initial_schema,
    v0002_board_section_and_profiles,
    v0003_username_nocase_index,
)
from nobby.utils.clock import now_epoch

logger = logging.getLogger(__name__)

SCHEMA_VERSION_TABLE = "schema_version"

schema_version = sa.table(
    SCHEMA_VERSION_TABLE,
    sa.column("version", sa.Integer),
    sa.column("description", sa.String),
    sa.column("applied_at", sa.BigInteger),
)


@dataclass(frozen=True)
class Migration:
    """One schema step. ``upgrade`` must be safe on a partly upgraded schema."""

    version: int
    description: str
    upgrade: Callable[[Operations], None]


MIGRATIONS: list[Migration] = [
    Migration(module.version, module.description, module.upgrade)
    for module in (
        v0001_initial_schema,
        v0002_board_section_and_profiles,
        v0003_username_nocase_index,
    )
]


def _ensure_version_table(op: Operations) -> None:
    if has_table(op, SCHEMA_VERSION_TABLE):
        return
    op.create_table(
        SCHEMA_VERSION_TABLE,
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=False),
        sa.Column("applied_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("version"),
    )


def current_version(connection: Connection) -> int:
    """Return the highest applied migration version, or 0 for a fresh database."""
    if not sa.inspect(connection).has_table(SCHEMA_VERSION_TABLE):
        return 0
    result = connection.execute(sa.select(sa.func.max(schema_version.c.version)))
    return result.scalar() or 0


def apply_migrations(connection: Connection, migrations: list[Migration] | None = None) -> int:
    """Apply pending migrations on a synchronous connection.

    Returns:
        The schema version after the run.
    """
    migrations = MIGRATIONS if migrations is None else migrations
    op = Operations(MigrationContext.configure(connection))
    _ensure_version_table(op)

    version = current_version(connection)
    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version <= version:
            continue
        logger.info("Applying migration %d: %s", migration.version, migration.description)
        migration.upgrade(op)
        connection.execute(
            schema_version.insert().values(
                version=migration.version,
                description=migration.description,
                applied_at=now_epoch(),
            )
        )
        version = migration.version

    return version


async def run_migrations(database: Database) -> int:
    """Bring the schema up to date. Safe to call on every startup.

    Creates missing tables and indexes and adds missing columns; never drops
    or rewrites data.

    Returns:
        The schema version after the run.
    """
    async with database.engine.begin() as connection:
        version = await connection.run_sync(apply_migrations)
    logger.info("Database schema at version %d", version)
    return version
