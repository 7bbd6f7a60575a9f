"""Shared helpers for tests that inspect the database directly."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update

from mecha_board.models import NewsItem, Vote
from mecha_board.repositories.news_store import NewsStore


async def set_created_at(store: NewsStore, news_item_id: int, created_at: datetime) -> None:
    """Backdate (or forward-date) a news item for ordering tests."""
    async with store.session_factory.begin() as session:
        await session.execute(
            update(NewsItem)
            .where(NewsItem.id == news_item_id)
            .values(created_at=created_at)
            .execution_options(synchronize_session=False)
        )


async def count_votes(store: NewsStore, news_item_id: int, **filters: str) -> int:
    """Count vote ledger rows for an item, optionally filtered by column."""
    stmt = select(func.count()).select_from(Vote).where(Vote.news_item_id == news_item_id)
    for column, value in filters.items():
        stmt = stmt.where(getattr(Vote, column) == value)
    async with store.session_factory() as session:
        return int(await session.scalar(stmt) or 0)


async def get_vote(
    store: NewsStore,
    news_item_id: int,
    voter_ip: str,
    vote_source: str = "human",
) -> Vote | None:
    """Return the ledger row for one (item, voter, source) triple."""
    async with store.session_factory() as session:
        return await session.scalar(
            select(Vote).where(
                Vote.news_item_id == news_item_id,
                Vote.voter_ip == voter_ip,
                Vote.vote_source == vote_source,
            )
        )


async def set_vote_created_at(store: NewsStore, vote_id: int, created_at: datetime) -> None:
    """Backdate a vote ledger row."""
    async with store.session_factory.begin() as session:
        await session.execute(
            update(Vote)
            .where(Vote.id == vote_id)
            .values(created_at=created_at)
            .execution_options(synchronize_session=False)
        )
