"""SQLAlchemy models for the Mecha Board application."""

from .news_item import DEFAULT_AUTHOR, MAX_AUTHOR_LENGTH, MAX_SUMMARY_LENGTH, NewsItem
from .vote import Vote, VoteSource, VoteType

__all__ = [
    "DEFAULT_AUTHOR",
    "MAX_AUTHOR_LENGTH",
    "MAX_SUMMARY_LENGTH",
    "NewsItem",
    "Vote",
    "VoteSource",
    "VoteType",
]
