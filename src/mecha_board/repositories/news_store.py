"""Persistence for news items and the vote ledger.

``NewsStore`` exposes one backend-agnostic set of operations. Two concrete
stores implement it: ``SQLiteNewsStore`` for the embedded file database and
``PostgresNewsStore`` for a client/server database. ``open_store`` picks one
from settings exactly once, at start-up.
"""
from __future__ import annotations

import abc
import asyncio
import contextlib
import enum
import logging
import ssl
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import Date, case, cast, func, select, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import ColumnElement

from mecha_board.core.errors import NewsItemNotFoundError, ValidationError
from mecha_board.core.settings import Settings
from mecha_board.db.migrations import run_migrations
from mecha_board.db.session import build_engine
from mecha_board.models import DEFAULT_AUTHOR, NewsItem, Vote, VoteSource, VoteType
from mecha_board.schemas.news_item import SortMode
from mecha_board.schemas.vote import VoteCounts

__all__ = [
    "NewsStore",
    "PostgresNewsStore",
    "SQLiteNewsStore",
    "managed_store",
    "open_store",
]

logger = logging.getLogger(__name__)

_SCORE_DELTA = case(
    (Vote.vote_type == VoteType.UP.value, 1),
    (Vote.vote_type == VoteType.DOWN.value, -1),
    else_=0,
)


def _coerce(enum_cls: type[enum.Enum], value: Any, field: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as err:
        allowed = ", ".join(repr(member.value) for member in enum_cls)
        raise ValidationError(f"{field} must be one of {allowed}") from err


class NewsStore(abc.ABC):
    """Backend-agnostic access to news items and votes.

    Subclasses only decide how the engine is built, what "today" means to the
    database, and how concurrent callers are serialised.
    """

    backend: str = ""

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize the store around an already configured async engine."""
        self.engine = engine
        self.session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # -- lifecycle -----------------------------------------------------------

    async def initialize(self) -> None:
        """Bring the schema up to date; safe to call on every start."""
        async with self._serialized(), self.engine.begin() as conn:
            applied = await conn.run_sync(run_migrations)
        if applied:
            logger.info("%s schema migrated to version %d", self.backend, max(applied))

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self.engine.dispose()
        logger.info("Closed %s news store", self.backend)

    # -- backend hooks -------------------------------------------------------

    @abc.abstractmethod
    def _created_today(self) -> ColumnElement[bool]:
        """Return a predicate matching items created on the database's current date."""

    def _serialized(self) -> contextlib.AbstractAsyncContextManager[Any]:
        """Return a guard held around each operation; a no-op by default."""
        return contextlib.nullcontext()

    # -- news items ----------------------------------------------------------

    async def add_news_item(self, summary: str, link: str, author: str | None = None) -> int:
        """Insert a news item and return its new identifier.

        Callers validate summary length and URL shape first; the table's check
        constraints are a second line of defence.
        """
        item = NewsItem(
            summary=summary,
            link=link,
            author=author if author and author.strip() else DEFAULT_AUTHOR,
        )
        async with self._serialized(), self.session_factory.begin() as session:
            session.add(item)
            await session.flush()
            news_item_id = item.id
        logger.debug("Stored news item %d", news_item_id)
        return news_item_id

    async def get_news_item(self, news_item_id: int) -> NewsItem | None:
        """Return a single news item, or None when it does not exist."""
        async with self._serialized(), self.session_factory() as session:
            return await session.get(NewsItem, news_item_id)

    async def get_all_news_items(self) -> list[NewsItem]:
        """Return all items by descending score, newest first within a score."""
        return await self.get_news_items_by_sort(SortMode.CLASSIC)

    async def get_news_items_by_sort(self, mode: SortMode | str) -> list[NewsItem]:
        """Return items for one of the three listing orders.

        Args:
            mode: ``top`` (today's items by score), ``new`` (newest first) or
                ``classic`` (all items by score).

        Raises:
            ValidationError: If ``mode`` is not a known sort mode.
        """
        mode = _coerce(SortMode, mode, "sort")
        stmt = select(NewsItem)
        if mode is SortMode.NEW:
            stmt = stmt.order_by(NewsItem.created_at.desc(), NewsItem.id.desc())
        else:
            if mode is SortMode.TOP:
                stmt = stmt.where(self._created_today())
            stmt = stmt.order_by(NewsItem.vote_score.desc(), NewsItem.created_at.desc())

        async with self._serialized(), self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars())

    # -- vote ledger ---------------------------------------------------------

    async def vote(
        self,
        news_item_id: int,
        vote_type: VoteType | str,
        voter_ip: str,
        vote_source: VoteSource | str = VoteSource.HUMAN,
    ) -> bool:
        """Record a vote and recompute the item's score.

        The lookup, the insert-or-update and the score recompute run in one
        transaction with the parent item row locked, so concurrent votes on the
        same item cannot interleave their recomputes.

        Returns:
            False if the same voter already cast this exact vote, True otherwise

        Raises:
            NewsItemNotFoundError: If the news item does not exist.
            ValidationError: If ``vote_type`` or ``vote_source`` is not a known value.
        """
        vote_type = _coerce(VoteType, vote_type, "vote_type")
        vote_source = _coerce(VoteSource, vote_source, "vote_source")

        async with self._serialized(), self.session_factory.begin() as session:
            locked = await session.execute(
                select(NewsItem.id).where(NewsItem.id == news_item_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise NewsItemNotFoundError(news_item_id)

            existing = await session.scalar(
                select(Vote).where(
                    Vote.news_item_id == news_item_id,
                    Vote.voter_ip == voter_ip,
                    Vote.vote_source == vote_source.value,
                )
            )
            if existing is not None:
                if existing.vote_type == vote_type.value:
                    return False
                existing.vote_type = vote_type.value
                existing.created_at = func.current_timestamp()
            else:
                session.add(
                    Vote(
                        news_item_id=news_item_id,
                        vote_type=vote_type.value,
                        voter_ip=voter_ip,
                        vote_source=vote_source.value,
                    )
                )
            await session.flush()
            await self._recompute_score(session, news_item_id)

        logger.debug(
            "Recorded %s %s vote on news item %d",
            vote_source.value,
            vote_type.value,
            news_item_id,
        )
        return True

    async def _recompute_score(self, session: AsyncSession, news_item_id: int) -> None:
        score = select(func.coalesce(func.sum(_SCORE_DELTA), 0)).where(
            Vote.news_item_id == news_item_id
        )
        await session.execute(
            update(NewsItem)
            .where(NewsItem.id == news_item_id)
            .values(vote_score=score.scalar_subquery())
            .execution_options(synchronize_session=False)
        )

    async def get_vote_counts(self, news_item_id: int) -> VoteCounts:
        """Return up/down totals split by vote source, zero where no rows exist."""
        stmt = (
            select(
                Vote.vote_source,
                func.sum(case((Vote.vote_type == VoteType.UP.value, 1), else_=0)),
                func.sum(case((Vote.vote_type == VoteType.DOWN.value, 1), else_=0)),
            )
            .where(Vote.news_item_id == news_item_id)
            .group_by(Vote.vote_source)
        )
        async with self._serialized(), self.session_factory() as session:
            rows = (await session.execute(stmt)).all()

        counts: dict[str, int] = {}
        for source, upvotes, downvotes in rows:
            counts[f"{source}_upvotes"] = int(upvotes or 0)
            counts[f"{source}_downvotes"] = int(downvotes or 0)
        return VoteCounts(**counts)


class SQLiteNewsStore(NewsStore):
    """Embedded store on a single shared SQLite connection.

    Every operation holds one asyncio lock, so statements reach the
    connection strictly one operation at a time.
    """

    backend = "sqlite"

    def __init__(self, engine: AsyncEngine) -> None:
        super().__init__(engine)
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> SQLiteNewsStore:
        """Build a store on the configured SQLite file."""
        return cls.from_url(
            settings.async_database_url,
            echo=settings.sql_debug,
            slow_query_threshold_ms=settings.slow_query_threshold_ms,
        )

    @classmethod
    def from_url(cls, url: str, **engine_options: Any) -> SQLiteNewsStore:
        """Build a store for an explicit ``sqlite+aiosqlite`` URL."""
        engine = build_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            **engine_options,
        )
        return cls(engine)

    def _serialized(self) -> contextlib.AbstractAsyncContextManager[Any]:
        return self._lock

    def _created_today(self) -> ColumnElement[bool]:
        # CURRENT_TIMESTAMP and date('now') are both UTC in SQLite.
        return func.date(NewsItem.created_at) == func.date("now")


class PostgresNewsStore(NewsStore):
    """Client/server store; concurrent votes are ordered by row locks."""

    backend = "postgresql"

    @classmethod
    def from_settings(cls, settings: Settings) -> PostgresNewsStore:
        """Build a store for the configured DATABASE_URL."""
        connect_args: dict[str, Any] = {}
        if settings.is_production:
            connect_args["ssl"] = relaxed_ssl_context()
        engine = build_engine(
            settings.async_database_url,
            echo=settings.sql_debug,
            slow_query_threshold_ms=settings.slow_query_threshold_ms,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        return cls(engine)

    def _created_today(self) -> ColumnElement[bool]:
        # CURRENT_DATE follows the database session's timezone.
        return cast(NewsItem.created_at, Date) == func.current_date()


def relaxed_ssl_context() -> ssl.SSLContext:
    """Return a TLS context that encrypts without verifying the server certificate."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


async def open_store(settings: Settings) -> NewsStore:
    """Select, build and migrate the store configured by ``settings``.

    A PostgreSQL store that cannot connect raises; there is no fallback to the
    embedded database.
    """
    store: NewsStore
    if settings.is_postgres:
        store = PostgresNewsStore.from_settings(settings)
    else:
        store = SQLiteNewsStore.from_settings(settings)

    try:
        await store.initialize()
    except Exception:
        logger.error("Failed to initialize %s news store", store.backend, exc_info=True)
        await store.close()
        raise
    logger.info("Using %s news store", store.backend)
    return store


@contextlib.asynccontextmanager
async def managed_store(settings: Settings) -> AsyncIterator[NewsStore]:
    """Open a store for the duration of the block and always close it."""
    store = await open_store(settings)
    try:
        yield store
    finally:
        await store.close()
