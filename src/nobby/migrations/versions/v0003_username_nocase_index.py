"""Case-insensitive username uniqueness and author lookup indexes

Version: 3
Create Date: 2026-03-21 09:15:00.000000

"""

import sqlalchemy as sa
from alembic.operations import Operations

from nobby.migrations.helpers import create_index_if_missing

version = 3
description = "Case-insensitive username index and author indexes"


def upgrade(op: Operations) -> None:
    """Enforce username uniqueness in the database rather than in the application.

    Fails if the table already holds usernames that differ only by case;
    those rows have to be renamed by hand before the upgrade can run.
    """
    create_index_if_missing(
        op,
        "ux_account_user_username_nocase",
        "account_user",
        [sa.text("lower(username)")],
        unique=True,
    )

    # Counter reconciliation counts rows per author name
    create_index_if_missing(op, "ix_topic_author_name", "topic", ["author_name"])
    create_index_if_missing(op, "ix_post_author_name", "post", ["author_name"])
