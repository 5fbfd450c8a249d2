"""Add board sections, account roles, counters and profile fields

Version: 2
Create Date: 2026-02-03 18:30:00.000000

"""

import sqlalchemy as sa
from alembic.operations import Operations

from nobby.migrations.helpers import add_column_if_missing

version = 2
description = "Board sections, account counters and profile fields"


def upgrade(op: Operations) -> None:
    """Add columns introduced after the first release, keeping existing rows."""
    add_column_if_missing(
        op,
        "board",
        sa.Column(
            "section",
            sa.String(length=120),
            nullable=False,
            server_default="General Discussions",
        ),
    )

    add_column_if_missing(
        op,
        "account_user",
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("0")),
    )
    add_column_if_missing(
        op,
        "account_user",
        sa.Column("thread_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    add_column_if_missing(
        op,
        "account_user",
        sa.Column("post_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    add_column_if_missing(
        op,
        "account_user",
        sa.Column("user_status", sa.String(length=140), nullable=False, server_default=""),
    )
    add_column_if_missing(
        op,
        "account_user",
        sa.Column("user_bio", sa.Text(), nullable=False, server_default=""),
    )
