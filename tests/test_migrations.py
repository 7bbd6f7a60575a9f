"""Tests for versioned schema migrations."""

import pytest
from sqlalchemy import inspect, select, text

from mecha_board.db.migrations import MIGRATIONS, run_migrations, schema_migrations
from mecha_board.repositories.news_store import SQLiteNewsStore

LEGACY_SCHEMA = (
    """
    CREATE TABLE news_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        summary TEXT NOT NULL CHECK(length(summary) <= 200),
        link TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        vote_score INTEGER DEFAULT 0
    )
    """,
    """
    CREATE TABLE votes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        news_item_id INTEGER NOT NULL,
        vote_type TEXT NOT NULL CHECK(vote_type IN ('up', 'down')),
        voter_ip TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (news_item_id) REFERENCES news_items (id) ON DELETE CASCADE
    )
    """,
    "INSERT INTO news_items (summary, link) VALUES ('Legacy item', 'https://ex.com/old')",
    "INSERT INTO votes (news_item_id, vote_type, voter_ip) VALUES (1, 'up', '9.9.9.9')",
)


def _columns(conn, table_name):
    return {column["name"] for column in inspect(conn).get_columns(table_name)}


def _recorded(conn):
    return list(conn.execute(select(schema_migrations.c.version)).scalars())


@pytest.fixture()
def db_file_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'board.db'}"


@pytest.mark.asyncio
async def test_fresh_database_gets_full_schema(store) -> None:
    async with store.engine.connect() as conn:
        news_columns = await conn.run_sync(_columns, "news_items")
        vote_columns = await conn.run_sync(_columns, "votes")
        versions = await conn.run_sync(_recorded)

    assert {"id", "summary", "link", "author", "created_at", "vote_score"} <= news_columns
    assert {"id", "news_item_id", "vote_type", "voter_ip", "vote_source", "created_at"} <= vote_columns
    assert sorted(versions) == [m.version for m in MIGRATIONS]


@pytest.mark.asyncio
async def test_rerunning_migrations_is_a_no_op(store) -> None:
    async with store.engine.begin() as conn:
        applied = await conn.run_sync(run_migrations)
    assert applied == []

    await store.initialize()
    async with store.engine.connect() as conn:
        versions = await conn.run_sync(_recorded)
    assert len(versions) == len(MIGRATIONS)


@pytest.mark.asyncio
async def test_steps_are_idempotent_without_bookkeeping(store) -> None:
    """Each step probes the schema, so replaying it on a migrated database is safe."""
    async with store.engine.begin() as conn:
        for migration in MIGRATIONS:
            await conn.run_sync(migration.apply)


@pytest.mark.asyncio
async def test_legacy_schema_is_upgraded(db_file_url) -> None:
    store = SQLiteNewsStore.from_url(db_file_url)
    try:
        async with store.engine.begin() as conn:
            for statement in LEGACY_SCHEMA:
                await conn.execute(text(statement))

        await store.initialize()

        async with store.engine.connect() as conn:
            assert "author" in await conn.run_sync(_columns, "news_items")
            assert "vote_source" in await conn.run_sync(_columns, "votes")

        legacy = await store.get_news_item(1)
        assert legacy.author == "Anonymous"
        counts = await store.get_vote_counts(1)
        assert counts.human_upvotes == 1

        # The same IP may now vote once per source, but only once per source.
        assert await store.vote(1, "up", "9.9.9.9", "machine") is True
        assert await store.vote(1, "up", "9.9.9.9", "machine") is False
        assert (await store.get_news_item(1)).vote_score == 2
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_restart_on_existing_file_keeps_data(db_file_url) -> None:
    first = SQLiteNewsStore.from_url(db_file_url)
    await first.initialize()
    news_item_id = await first.add_news_item("Persisted", "https://ex.com/p")
    await first.close()

    second = SQLiteNewsStore.from_url(db_file_url)
    try:
        await second.initialize()
        item = await second.get_news_item(news_item_id)
        assert item.summary == "Persisted"
    finally:
        await second.close()
