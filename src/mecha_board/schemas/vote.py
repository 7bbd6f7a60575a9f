"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from mecha_board.models.vote import VoteSource, VoteType


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    news_item_id: int
    vote_type: VoteType = Field(..., description="'up' or 'down'")
    vote_source: VoteSource = Field(
        VoteSource.HUMAN,
        description="'human' for the browser UI, 'machine' for programmatic clients",
    )


class VoteResult(BaseModel):
    """Score of a news item after a vote changed it."""

    news_item_id: int
    vote_score: int


class VoteCounts(BaseModel):
    """Per-source vote totals for one news item."""

    human_upvotes: int = 0
    human_downvotes: int = 0
    machine_upvotes: int = 0
    machine_downvotes: int = 0
