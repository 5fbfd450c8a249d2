"""Versioned schema migrations."""

from nobby.migrations.runner import MIGRATIONS, Migration, current_version, run_migrations

__all__ = ["MIGRATIONS", "Migration", "current_version", "run_migrations"]
