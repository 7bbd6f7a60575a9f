"""Pydantic schemas for the Mecha Board API."""

from .news_item import NewsItemCreate, NewsItemDetail, NewsItemOut, SortMode
from .vote import VoteCounts, VoteCreate, VoteResult

__all__ = [
    "NewsItemCreate",
    "NewsItemDetail",
    "NewsItemOut",
    "SortMode",
    "VoteCounts",
    "VoteCreate",
    "VoteResult",
]
