"""Shared test fixtures: in-memory RedisJSON store, app, and HTTP client."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from fakeredis import FakeAsyncRedis
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from voter_api.core.config import Settings, get_settings
from voter_api.core.dependencies import get_redis
from voter_api.main import create_app
from voter_api.schemas.voter import VoterHistory, VoterItem


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        redis_url="redis://localhost:6379/0",
        history_update_max_retries=3,
    )


@pytest.fixture
async def redis_client() -> AsyncGenerator[FakeAsyncRedis]:
    """Create an isolated in-memory Redis with JSON support."""
    client = FakeAsyncRedis(decode_responses=True)
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def vote_date() -> datetime:
    return datetime(2024, 11, 5, 14, 30, tzinfo=UTC)


@pytest.fixture
def jane(vote_date: datetime) -> VoterItem:
    """A voter with two recorded polls."""
    return VoterItem(
        id=1,
        name="Jane Smith",
        email="jane@example.com",
        vote_history=[
            VoterHistory(poll_id=1, vote_id=10, vote_date=vote_date),
            VoterHistory(poll_id=2, vote_id=20, vote_date=vote_date),
        ],
    )


@pytest.fixture
def app(redis_client: FakeAsyncRedis, settings: Settings) -> FastAPI:
    """Create the full application wired to the in-memory store."""
    with patch("voter_api.main.get_settings", return_value=settings):
        test_app = create_app()
    test_app.dependency_overrides[get_redis] = lambda: redis_client
    test_app.dependency_overrides[get_settings] = lambda: settings
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
