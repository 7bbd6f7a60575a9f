# src/mecha_board/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .news import router as news_router
from .votes import router as votes_router

__all__ = ["news_router", "votes_router"]
