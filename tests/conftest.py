# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from mecha_board.core.settings import Settings
from mecha_board.main import create_app
from mecha_board.repositories.news_store import NewsStore, SQLiteNewsStore

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def store() -> AsyncIterator[NewsStore]:
    """Provide a migrated in-memory SQLite store per test."""
    news_store = SQLiteNewsStore.from_url(TEST_DB_URL)
    await news_store.initialize()
    try:
        yield news_store
    finally:
        await news_store.close()


@pytest.fixture()
def test_settings() -> Settings:
    """Settings pointing the application at an in-memory SQLite database."""
    return Settings(database_url=None, sqlite_path=":memory:", environment="test")


@pytest.fixture()
def client(test_settings: Settings) -> Iterator[TestClient]:
    app = create_app(test_settings)
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
