"""News item Pydantic schemas."""

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .vote import VoteCounts


class SortMode(str, enum.Enum):
    """Named listing orders."""

    TOP = "top"
    NEW = "new"
    CLASSIC = "classic"


class NewsItemCreate(BaseModel):
    """Schema for submitting a news item.

    Fields are kept loose here; the news service trims and validates them so
    failures come back as 400 responses with a readable message.
    """

    summary: str = Field(..., description="Short summary, at most 200 characters")
    link: str = Field(..., description="Absolute URL of the article")
    author: str | None = Field(None, description="Display name, at most 50 characters")


class NewsItemOut(BaseModel):
    """Schema for news items returned by the API."""

    id: int
    summary: str
    link: str
    author: str
    created_at: datetime
    vote_score: int

    model_config = ConfigDict(from_attributes=True)


class NewsItemDetail(NewsItemOut):
    """A news item together with its per-source vote breakdown."""

    votes: VoteCounts
