"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")

from nobby.api.deps import get_forum
from nobby.config import Settings
from nobby.context import ForumContext, open_forum
from nobby.database import Database, open_pool
from nobby.main import app
from nobby.services.mailer import LogMailer

TEST_SECRET = "test-secret-key-for-testing-at-least-32-characters-long"
TEST_PASSWORD = "correct-horse"


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings for a throwaway database with cheap password hashing."""
    return Settings(
        secret_key=TEST_SECRET,
        database_path=str(tmp_path / "forum.db"),
        pool_size=4,
        pool_timeout=5.0,
        page_size=20,
        password_iterations=1000,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database]:
    """A bare connection pool; no migrations applied."""
    db = open_pool(settings.database_path, settings.pool_size, timeout=settings.pool_timeout)
    yield db
    await db.dispose()


@pytest.fixture
async def forum(settings: Settings) -> AsyncGenerator[ForumContext]:
    """A migrated, seeded forum on its own database file."""
    context = await open_forum(settings, mailer=LogMailer())
    yield context
    await context.close()


@pytest.fixture
async def client(forum: ForumContext) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against ``forum``."""
    app.dependency_overrides[get_forum] = lambda: forum
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def other_client(client: AsyncClient) -> AsyncGenerator[AsyncClient]:
    """A second client with its own cookie jar, talking to the same forum."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client: AsyncClient):
    """Register an account through the API; the client keeps its session cookie."""

    async def _register(username: str, email: str | None = None, password: str = TEST_PASSWORD):
        return await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username.lower()}@example.com",
                "password": password,
                "repeat_password": password,
            },
        )

    return _register
