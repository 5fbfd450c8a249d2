"""Inspection helpers that keep each migration step idempotent."""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic.operations import Operations


def has_table(op: Operations, table_name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(table_name)


def has_column(op: Operations, table_name: str, column_name: str) -> bool:
    columns = sa.inspect(op.get_bind()).get_columns(table_name)
    return any(column["name"] == column_name for column in columns)


def has_index(op: Operations, table_name: str, index_name: str) -> bool:
    # Read sqlite_master directly: the inspector skips expression indexes.
    result = op.get_bind().execute(
        sa.text(
            "SELECT 1 FROM sqlite_master "
            "WHERE type = 'index' AND tbl_name = :table_name AND name = :index_name"
        ),
        {"table_name": table_name, "index_name": index_name},
    )
    return result.first() is not None


def add_column_if_missing(op: Operations, table_name: str, column: sa.Column) -> bool:
    """Add ``column`` unless the table already has it. Returns True if added."""
    if has_column(op, table_name, column.name):
        return False
    op.add_column(table_name, column)
    return True


def create_index_if_missing(
    op: Operations,
    index_name: str,
    table_name: str,
    columns: Sequence[str | sa.TextClause],
    unique: bool = False,
) -> bool:
    """Create an index unless one with the same name exists. Returns True if created."""
    if has_index(op, table_name, index_name):
        return False
    op.create_index(index_name, table_name, list(columns), unique=unique)
    return True
