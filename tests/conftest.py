"""
Shared fixtures: a temporary SQLite store and an aiohttp test client.
"""

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from leaderboard import DatabaseManager, LeaderboardConfig, create_app


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path}"


@pytest.fixture
def config(monkeypatch, tmp_path, database_url):
    for var in ("HOST", "PORT", "DB_NAME", "COLLECTION_NAME", "TOP_N", "CORS_ENABLED", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DATABASE_URL", database_url)
    return LeaderboardConfig(env_file=str(tmp_path / "missing.env"))


@pytest_asyncio.fixture
async def db(config):
    manager = DatabaseManager(config.database_url, config.get("store", "database"))
    await manager.connect()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def collection(db, config):
    handle = db.collection(config.get("store", "collection"))
    await handle.ensure_schema()
    return handle


@pytest_asyncio.fixture
async def client(collection, config):
    async with TestClient(TestServer(create_app(collection, config))) as test_client:
        yield test_client
