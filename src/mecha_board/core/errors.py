"""Exception types raised by the Mecha Board core."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

# Storage failures are SQLAlchemy's own exceptions, propagated unmodified.
StorageError = SQLAlchemyError


class MechaBoardError(Exception):
    """Base exception for application-level failures."""


class ValidationError(MechaBoardError, ValueError):
    """Raised when submitted input fails shape constraints.

    Validation errors are surfaced directly to the caller and never retried.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NewsItemNotFoundError(MechaBoardError, LookupError):
    """Raised when an operation names a news item that does not exist."""

    def __init__(self, news_item_id: int) -> None:
        super().__init__(f"News item {news_item_id} not found")
        self.news_item_id = news_item_id


__all__ = [
    "MechaBoardError",
    "NewsItemNotFoundError",
    "StorageError",
    "ValidationError",
]
