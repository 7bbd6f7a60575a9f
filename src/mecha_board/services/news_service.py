"""Service-level helpers for submitting and presenting news items."""
from __future__ import annotations

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mecha_board.core.errors import ValidationError
from mecha_board.models import MAX_AUTHOR_LENGTH, MAX_SUMMARY_LENGTH, NewsItem
from mecha_board.repositories.news_store import NewsStore
from mecha_board.schemas.news_item import NewsItemDetail, NewsItemOut
from mecha_board.schemas.vote import VoteCounts

_url_adapter = TypeAdapter(AnyUrl)


def _is_absolute_url(value: str) -> bool:
    # Relative references fail to parse; host-less schemes such as mailto: are accepted.
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def validate_submission(
    summary: str | None,
    link: str | None,
    author: str | None = None,
) -> tuple[str, str, str | None]:
    """Clean and check a news submission.

    Args:
        summary: Raw summary text.
        link: Raw article URL.
        author: Optional display name; blank means anonymous.

    Returns:
        The trimmed summary, trimmed link and trimmed author (None when blank)

    Raises:
        ValidationError: If any field fails its constraints.
    """
    summary = (summary or "").strip()
    link = (link or "").strip()
    if not summary or not link:
        raise ValidationError("Summary and link are required")
    if len(summary) > MAX_SUMMARY_LENGTH:
        raise ValidationError(f"Summary must be {MAX_SUMMARY_LENGTH} characters or less")
    if not _is_absolute_url(link):
        raise ValidationError("Invalid URL format")

    cleaned_author = (author or "").strip() or None
    if cleaned_author is not None and len(cleaned_author) > MAX_AUTHOR_LENGTH:
        raise ValidationError(f"Author must be {MAX_AUTHOR_LENGTH} characters or less")
    return summary, link, cleaned_author


async def submit_news_item(
    store: NewsStore,
    *,
    summary: str | None,
    link: str | None,
    author: str | None = None,
) -> int:
    """Validate a submission and persist it, returning the new item id."""
    summary, link, author = validate_submission(summary, link, author)
    return await store.add_news_item(summary, link, author)


def to_news_item_out(item: NewsItem, counts: VoteCounts | None = None) -> NewsItemOut:
    """Convert a NewsItem ORM instance to an API schema."""
    if counts is None:
        return NewsItemOut.model_validate(item)
    return NewsItemDetail.model_validate(
        {**NewsItemOut.model_validate(item).model_dump(), "votes": counts}
    )
