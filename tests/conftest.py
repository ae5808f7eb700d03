"""
User Service - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   Integration fixtures run the real Database gateway against a throwaway
       SQLite file (aiosqlite) with the shipped init.sql. Unit fixtures hand
       out a mock gateway instead.

Fixture Hierarchy (all function-scoped):
    ├── settings:        Settings record pointing at the repo's static/ and init.sql
    ├── database:        Database on a fresh SQLite file, schema initialized
    ├── mock_database:   MagicMock standing in for Database
    ├── test_client:     HTTPX AsyncClient wired to create_app(settings, database)
    └── config_file:     Writes a config.json into tmp_path and returns its path
"""

import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from user_api.config import Settings
from user_api.database import Database
from user_api.main import create_app

# Keep test output quiet and independent of the developer's environment
os.environ["LOG_LEVEL"] = "WARNING"
for _var in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "APP_PORT", "DATABASE_URL"):
    os.environ.pop(_var, None)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
INIT_SCRIPT = PROJECT_ROOT / "init.sql"
STATIC_DIR = PROJECT_ROOT / "static"

BASE_CONFIG = {
    "db_host": "localhost",
    "db_port": "5432",
    "db_user": "postgres",
    "db_password": "postgres",
    "db_name": "usersdb",
    "app_port": "8080",
}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        **BASE_CONFIG,
        static_dir=str(STATIC_DIR),
        init_script=str(INIT_SCRIPT),
    )


@pytest.fixture
def config_file(tmp_path):
    """
    Writes BASE_CONFIG (optionally updated) to tmp_path/config.json.

    Usage:
        def test_x(config_file):
            path = config_file(db_host="other")
    """
    def _write(**overrides):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({**BASE_CONFIG, **overrides}), encoding="utf-8")
        return path

    return _write


@pytest_asyncio.fixture
async def database(tmp_path):
    """Real gateway on a per-test SQLite file with the users table created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await db.init_schema(INIT_SCRIPT)
    yield db
    await db.dispose()


@pytest.fixture
def mock_database():
    """
    Mock gateway for unit tests.

    Usage:
        mock_database.list_users.return_value = [User(id="u1", name="Alice")]
    """
    db = MagicMock(spec=Database)
    db.ping = AsyncMock(return_value=True)
    db.insert_user = AsyncMock(return_value=None)
    db.list_users = AsyncMock(return_value=[])
    db.dispose = AsyncMock()
    return db


@pytest_asyncio.fixture
async def test_client(settings, database):
    """
    HTTPX client talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    app = create_app(settings, database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def mock_client(settings, mock_database):
    """Same as test_client, backed by mock_database."""
    app = create_app(settings, mock_database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
