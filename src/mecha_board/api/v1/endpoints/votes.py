# src/mecha_board/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Mecha Board API."""

import logging

from fastapi import APIRouter, HTTPException, status

from mecha_board.core.errors import NewsItemNotFoundError
from mecha_board.schemas.vote import VoteCreate, VoteResult

from ..dependencies import ClientIpDep, StoreDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResult)
async def cast_vote(vote_data: VoteCreate, store: StoreDep, voter_ip: ClientIpDep) -> VoteResult:
    """Cast, or change, a vote on a news item.

    Repeating the voter's current vote is rejected with 409 and changes nothing.
    """
    try:
        changed = await store.vote(
            vote_data.news_item_id,
            vote_data.vote_type,
            voter_ip,
            vote_data.vote_source,
        )
    except NewsItemNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News item not found") from err

    if not changed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Vote unchanged")

    item = await store.get_news_item(vote_data.news_item_id)
    score = item.vote_score if item is not None else 0
    return VoteResult(news_item_id=vote_data.news_item_id, vote_score=score)
