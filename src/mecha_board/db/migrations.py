"""Versioned schema migrations applied at store start-up.

Every step is idempotent: it probes the live schema through the SQLAlchemy
inspector before changing anything, so re-running the whole list against an
up-to-date database is a no-op. Applied versions are recorded in
``schema_migrations`` and skipped on later runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    func,
    inspect,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Connection

from mecha_board.db.session import Base
from mecha_board.models import NewsItem, Vote

logger = logging.getLogger(__name__)

_bookkeeping = MetaData()

schema_migrations = Table(
    "schema_migrations",
    _bookkeeping,
    Column("version", Integer, primary_key=True, autoincrement=False),
    Column("description", Text, nullable=False),
    Column("applied_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

LEGACY_VOTE_UNIQUE_INDEX = "idx_votes_unique"


@dataclass(frozen=True)
class Migration:
    """A single numbered schema change."""

    version: int
    description: str
    apply: Callable[[Connection], None]


def _column_names(conn: Connection, table_name: str) -> set[str]:
    return {column["name"] for column in inspect(conn).get_columns(table_name)}


def _index_names(conn: Connection, table_name: str) -> set[str]:
    inspector = inspect(conn)
    names = {index["name"] for index in inspector.get_indexes(table_name)}
    names.update(
        constraint["name"]
        for constraint in inspector.get_unique_constraints(table_name)
        if constraint.get("name")
    )
    return names


def _create_base_tables(conn: Connection) -> None:
    Base.metadata.create_all(conn, checkfirst=True)


def _add_news_item_author(conn: Connection) -> None:
    if "author" in _column_names(conn, NewsItem.__tablename__):
        return
    logger.info("Adding author column to news_items")
    conn.execute(
        text("ALTER TABLE news_items ADD COLUMN author TEXT NOT NULL DEFAULT 'Anonymous'")
    )


def _add_vote_source(conn: Connection) -> None:
    if "vote_source" not in _column_names(conn, Vote.__tablename__):
        logger.info("Adding vote_source column to votes")
        conn.execute(
            text(
                "ALTER TABLE votes ADD COLUMN vote_source TEXT NOT NULL DEFAULT 'human' "
                "CHECK (vote_source IN ('human', 'machine'))"
            )
        )

    existing = _index_names(conn, Vote.__tablename__)
    if "uq_votes_item_voter_source" in existing or LEGACY_VOTE_UNIQUE_INDEX in existing:
        return
    conn.execute(
        text(
            f"CREATE UNIQUE INDEX IF NOT EXISTS {LEGACY_VOTE_UNIQUE_INDEX} "
            "ON votes (news_item_id, voter_ip, vote_source)"
        )
    )


def _create_lookup_indexes(conn: Connection) -> None:
    for table in (NewsItem.__table__, Vote.__table__):
        for index in table.indexes:
            index.create(conn, checkfirst=True)


MIGRATIONS: tuple[Migration, ...] = (
    Migration(1, "create news_items and votes tables", _create_base_tables),
    Migration(2, "add news_items.author", _add_news_item_author),
    Migration(3, "add votes.vote_source and per-source uniqueness", _add_vote_source),
    Migration(4, "create score and vote lookup indexes", _create_lookup_indexes),
)


def applied_versions(conn: Connection) -> set[int]:
    """Return the migration versions already recorded in the database."""
    schema_migrations.create(conn, checkfirst=True)
    return set(conn.execute(select(schema_migrations.c.version)).scalars())


def run_migrations(
    conn: Connection,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> list[int]:
    """Apply every pending migration in version order.

    Args:
        conn: Synchronous connection inside an open transaction.
        migrations: Ordered migration list; defaults to ``MIGRATIONS``.

    Returns:
        Versions applied during this call (empty when already up to date)
    """
    done = applied_versions(conn)
    applied: list[int] = []
    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue
        logger.info("Applying schema migration %d: %s", migration.version, migration.description)
        migration.apply(conn)
        conn.execute(
            insert(schema_migrations).values(
                version=migration.version,
                description=migration.description,
            )
        )
        applied.append(migration.version)
    if not applied:
        logger.debug("Schema is up to date")
    return applied
