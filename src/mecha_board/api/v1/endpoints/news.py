# src/mecha_board/api/v1/endpoints/news.py
"""News item endpoints for the Mecha Board API."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from mecha_board.core.errors import ValidationError
from mecha_board.models import NewsItem
from mecha_board.schemas.news_item import NewsItemCreate, NewsItemDetail, NewsItemOut, SortMode
from mecha_board.schemas.vote import VoteCounts
from mecha_board.services.news_service import submit_news_item, to_news_item_out

from ..dependencies import StoreDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/news", tags=["news"])


async def _get_item_or_404(store: StoreDep, news_item_id: int) -> NewsItem:
    item = await store.get_news_item(news_item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News item not found")
    return item


@router.get("/", response_model=list[NewsItemOut])
async def list_news(
    store: StoreDep,
    sort: SortMode | None = Query(None, description="top, new or classic"),
) -> list[NewsItemOut]:
    """List news items in the requested order (score order by default)."""
    if sort is None:
        items = await store.get_all_news_items()
    else:
        items = await store.get_news_items_by_sort(sort)
    return [to_news_item_out(item) for item in items]


@router.post("/", response_model=NewsItemOut, status_code=status.HTTP_201_CREATED)
async def create_news(payload: NewsItemCreate, store: StoreDep) -> NewsItemOut:
    """Submit a news item."""
    try:
        news_item_id = await submit_news_item(
            store,
            summary=payload.summary,
            link=payload.link,
            author=payload.author,
        )
    except ValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err.message) from err

    logger.info("News item %d submitted", news_item_id)
    item = await _get_item_or_404(store, news_item_id)
    return to_news_item_out(item)


@router.get("/{news_item_id}", response_model=NewsItemDetail)
async def get_news(news_item_id: int, store: StoreDep) -> NewsItemOut:
    """Return one news item with its per-source vote counts."""
    item = await _get_item_or_404(store, news_item_id)
    counts = await store.get_vote_counts(news_item_id)
    return to_news_item_out(item, counts)


@router.get("/{news_item_id}/votes", response_model=VoteCounts)
async def get_news_votes(news_item_id: int, store: StoreDep) -> VoteCounts:
    """Return the human/machine vote breakdown for a news item."""
    await _get_item_or_404(store, news_item_id)
    return await store.get_vote_counts(news_item_id)
