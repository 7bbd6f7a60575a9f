# src/mecha_board/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import news_router, votes_router

__all__ = ["news_router", "votes_router"]
