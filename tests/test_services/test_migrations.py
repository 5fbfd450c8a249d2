"""Tests for schema migrations."""

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError

from nobby.database import Database
from nobby.migrations import MIGRATIONS, current_version, run_migrations

LEGACY_BOARD_TABLE = """
CREATE TABLE board (
    id INTEGER PRIMARY KEY,
    slug VARCHAR(64) NOT NULL,
    title VARCHAR(180) NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    created_at BIGINT NOT NULL
)
"""

LEGACY_USER_TABLE = """
CREATE TABLE account_user (
    id INTEGER PRIMARY KEY,
    username VARCHAR(30) NOT NULL,
    email VARCHAR(255) NOT NULL,
    password_salt VARCHAR(64) NOT NULL,
    password_hash VARCHAR(64) NOT NULL,
    password_iterations INTEGER NOT NULL,
    created_at BIGINT NOT NULL,
    updated_at BIGINT NOT NULL
)
"""

INSERT_USER = (
    "INSERT INTO account_user "
    "(username, email, password_salt, password_hash, password_iterations, created_at, updated_at) "
    "VALUES (:username, :email, 'aa', 'bb', 1000, 1, 1)"
)


async def column_names(database: Database, table_name: str) -> set[str]:
    async with database.engine.connect() as conn:
        columns = await conn.run_sync(lambda sync: sa.inspect(sync).get_columns(table_name))
    return {column["name"] for column in columns}


class TestRunMigrations:
    """Tests for run_migrations."""

    async def test_fresh_database(self, database: Database) -> None:
        """A new file is brought to the latest version with every table."""
        version = await run_migrations(database)
        assert version == MIGRATIONS[-1].version == 3

        async with database.engine.connect() as conn:
            tables = await conn.run_sync(lambda sync: sa.inspect(sync).get_table_names())
            assert await conn.run_sync(current_version) == 3
        for table in (
            "board",
            "topic",
            "post",
            "account_user",
            "user_session",
            "password_reset_token",
            "schema_version",
        ):
            assert table in tables

    async def test_rerun_is_noop(self, database: Database) -> None:
        """Running twice changes nothing and records each version once."""
        await run_migrations(database)
        assert await run_migrations(database) == 3

        async with database.engine.connect() as conn:
            result = await conn.exec_driver_sql(
                "SELECT version FROM schema_version ORDER BY version"
            )
            assert [row[0] for row in result] == [1, 2, 3]

    async def test_legacy_tables_gain_columns(self, database: Database) -> None:
        """Tables from the first release get the new columns and keep their rows."""
        async with database.engine.begin() as conn:
            await conn.exec_driver_sql(LEGACY_BOARD_TABLE)
            await conn.exec_driver_sql(LEGACY_USER_TABLE)
            await conn.exec_driver_sql(
                "INSERT INTO board (slug, title, description, created_at) "
                "VALUES ('main', 'Main', 'Old board', 1)"
            )
            await conn.execute(
                sa.text(INSERT_USER), {"username": "Nova", "email": "nova@example.com"}
            )

        await run_migrations(database)

        assert {"section"} <= await column_names(database, "board")
        assert {"is_admin", "thread_count", "post_count", "user_status", "user_bio"} <= (
            await column_names(database, "account_user")
        )

        async with database.engine.connect() as conn:
            board = (
                await conn.exec_driver_sql("SELECT slug, description, section FROM board")
            ).one()
            user = (
                await conn.exec_driver_sql(
                    "SELECT username, is_admin, thread_count, post_count, user_bio "
                    "FROM account_user"
                )
            ).one()
        assert tuple(board) == ("main", "Old board", "General Discussions")
        assert tuple(user) == ("Nova", 0, 0, 0, "")

    async def test_username_unique_ignoring_case(self, database: Database) -> None:
        await run_migrations(database)

        async with database.engine.begin() as conn:
            await conn.execute(sa.text(INSERT_USER), {"username": "Nova", "email": "a@example.com"})

        with pytest.raises(IntegrityError):
            async with database.engine.begin() as conn:
                await conn.execute(
                    sa.text(INSERT_USER), {"username": "NOVA", "email": "b@example.com"}
                )

    async def test_case_duplicates_block_upgrade(self, database: Database) -> None:
        """Legacy names that differ only by case stop the index from being built."""
        async with database.engine.begin() as conn:
            await conn.exec_driver_sql(LEGACY_USER_TABLE)
            await conn.execute(sa.text(INSERT_USER), {"username": "Nova", "email": "a@example.com"})
            await conn.execute(sa.text(INSERT_USER), {"username": "nova", "email": "b@example.com"})

        with pytest.raises(IntegrityError):
            await run_migrations(database)


async def test_foreign_keys_enabled(database: Database) -> None:
    """Every pooled connection enforces foreign keys."""
    async with database.engine.connect() as conn:
        result = await conn.exec_driver_sql("PRAGMA foreign_keys")
        assert result.scalar() == 1
