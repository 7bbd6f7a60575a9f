"""SQLAlchemy model for submitted news items."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mecha_board.db.session import Base

MAX_SUMMARY_LENGTH = 200
MAX_AUTHOR_LENGTH = 50
DEFAULT_AUTHOR = "Anonymous"


class NewsItem(Base):
    """A short news summary pointing at an external article.

    ``vote_score`` is denormalised from the votes table and recomputed after
    every vote mutation.
    """

    __tablename__ = "news_items"
    __table_args__ = (
        CheckConstraint(
            f"length(summary) <= {MAX_SUMMARY_LENGTH}",
            name="ck_news_items_summary_length",
        ),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        server_default=DEFAULT_AUTHOR,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
    )
    vote_score: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")


Index("idx_news_vote_score", NewsItem.vote_score.desc(), NewsItem.created_at.desc())
