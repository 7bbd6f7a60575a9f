"""Service layer helpers."""

from .news_service import (
    submit_news_item,
    to_news_item_out,
    validate_submission,
)

__all__ = [
    "submit_news_item",
    "to_news_item_out",
    "validate_submission",
]
