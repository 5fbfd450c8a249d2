"""Initial schema

Version: 1
Create Date: 2026-01-12 10:00:00.000000

"""

import sqlalchemy as sa
from alembic.operations import Operations

from nobby.migrations.helpers import create_index_if_missing, has_table

version = 1
description = "Initial schema"


def upgrade(op: Operations) -> None:
    """Create forum and account tables that do not exist yet."""
    # Content tables
    if not has_table(op, "board"):
        op.create_table(
            "board",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("slug", sa.String(length=64), nullable=False),
            sa.Column("title", sa.String(length=180), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(op, "ix_board_slug", "board", ["slug"], unique=True)

    if not has_table(op, "topic"):
        op.create_table(
            "topic",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("board_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=180), nullable=False),
            sa.Column("author_name", sa.String(length=60), nullable=False),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.Column("updated_at", sa.BigInteger(), nullable=False),
            sa.ForeignKeyConstraint(["board_id"], ["board.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(op, "ix_topic_board_id", "topic", ["board_id"])
    create_index_if_missing(op, "ix_topic_updated_at", "topic", ["updated_at"])

    if not has_table(op, "post"):
        op.create_table(
            "post",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("topic_id", sa.Integer(), nullable=False),
            sa.Column("author_name", sa.String(length=60), nullable=False),
            sa.Column("body", sa.Text(), nullable=False),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.ForeignKeyConstraint(["topic_id"], ["topic.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(op, "ix_post_topic_id", "post", ["topic_id"])
    create_index_if_missing(op, "ix_post_created_at", "post", ["created_at"])

    # Account tables
    if not has_table(op, "account_user"):
        op.create_table(
            "account_user",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("username", sa.String(length=30), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password_salt", sa.String(length=64), nullable=False),
            sa.Column("password_hash", sa.String(length=64), nullable=False),
            sa.Column("password_iterations", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.Column("updated_at", sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(op, "ix_account_user_username", "account_user", ["username"])
    create_index_if_missing(op, "ix_account_user_email", "account_user", ["email"], unique=True)

    if not has_table(op, "user_session"):
        op.create_table(
            "user_session",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("token", sa.String(length=64), nullable=False),
            sa.Column("expires_at", sa.BigInteger(), nullable=False),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["account_user.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(op, "ix_user_session_user_id", "user_session", ["user_id"])
    create_index_if_missing(op, "ix_user_session_token", "user_session", ["token"], unique=True)
    create_index_if_missing(op, "ix_user_session_expires_at", "user_session", ["expires_at"])

    if not has_table(op, "password_reset_token"):
        op.create_table(
            "password_reset_token",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("token", sa.String(length=64), nullable=False),
            sa.Column("expires_at", sa.BigInteger(), nullable=False),
            sa.Column("used_at", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
            sa.Column("created_at", sa.BigInteger(), nullable=False),
            sa.ForeignKeyConstraint(["user_id"], ["account_user.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
    create_index_if_missing(
        op, "ix_password_reset_token_user_id", "password_reset_token", ["user_id"]
    )
    create_index_if_missing(
        op, "ix_password_reset_token_token", "password_reset_token", ["token"], unique=True
    )
    create_index_if_missing(
        op, "ix_password_reset_token_expires_at", "password_reset_token", ["expires_at"]
    )
