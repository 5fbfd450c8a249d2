"""Tests for forum context startup."""

from pathlib import Path

import pytest

from nobby.config import DEVELOPMENT_SECRET_KEY, Settings
from nobby.context import open_forum
from nobby.services.base import InternalError
from nobby.services.mailer import LogMailer


async def test_reopen_keeps_data(settings: Settings) -> None:
    """A second startup on the same file migrates nothing and seeds nothing."""
    forum = await open_forum(settings)
    await forum.accounts.register("Nova", "nova@example.com", "hunter22")
    await forum.close()

    forum = await open_forum(settings)
    try:
        assert await forum.accounts.count_users() == 1
        assert len(await forum.content.list_boards()) == 1
    finally:
        await forum.close()


async def test_unopenable_database(tmp_path: Path, settings: Settings) -> None:
    """A path that cannot hold a database fails startup with InternalError."""
    broken = settings.model_copy(update={"database_path": str(tmp_path / "missing" / "forum.db")})
    with pytest.raises(InternalError):
        await open_forum(broken)


async def test_custom_mailer_is_used(settings: Settings) -> None:
    mailer = LogMailer()
    forum = await open_forum(settings, mailer=mailer)
    try:
        assert forum.mailer is mailer
    finally:
        await forum.close()


class TestSettings:
    """Tests for configuration validation."""

    def test_development_secret_warns(self) -> None:
        settings = Settings(secret_key=DEVELOPMENT_SECRET_KEY, debug=False)
        warnings = settings.validate_runtime_config()
        assert any("SECRET_KEY" in warning for warning in warnings)

    def test_strong_secret_no_warnings(self) -> None:
        settings = Settings(secret_key="s" * 40, debug=False)
        assert settings.validate_runtime_config() == []

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(secret_key="")

    def test_pool_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Settings(pool_size=0)
