"""Models capturing votes cast on news items."""

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from mecha_board.db.session import Base


class VoteType(str, enum.Enum):
    """Direction of a vote."""

    UP = "up"
    DOWN = "down"


class VoteSource(str, enum.Enum):
    """Who cast the vote: the browser UI or a programmatic client."""

    HUMAN = "human"
    MACHINE = "machine"


class Vote(Base):
    """One voter's current vote on a news item.

    At most one row exists per (news_item_id, voter_ip, vote_source); a later
    vote from the same triple overwrites ``vote_type`` and ``created_at``.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_votes_vote_type"),
        CheckConstraint(
            "vote_source IN ('human', 'machine')",
            name="ck_votes_vote_source",
        ),
        UniqueConstraint(
            "news_item_id",
            "voter_ip",
            "vote_source",
            name="uq_votes_item_voter_source",
        ),
        Index("idx_votes_news_id", "news_item_id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    news_item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("news_items.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Stored as plain text so both backends share the same CHECK constraint.
    vote_type: Mapped[str] = mapped_column(Text, nullable=False)
    voter_ip: Mapped[str] = mapped_column(Text, nullable=False)
    vote_source: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        server_default=VoteSource.HUMAN.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
    )
