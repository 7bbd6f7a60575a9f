"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from mecha_board.repositories.news_store import NewsStore

FALLBACK_CLIENT_IP = "127.0.0.1"


def get_store(request: Request) -> NewsStore:
    """Return the news store opened at application start-up.

    Raises:
        HTTPException: If the application has no open store
    """
    store: NewsStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is not available",
        )
    return store


def get_client_ip(request: Request) -> str:
    """Return the best-effort client IP used to deduplicate votes.

    The first entry of ``X-Forwarded-For`` wins; otherwise the transport-level
    peer address is used.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return FALLBACK_CLIENT_IP


# Type aliases for dependency injection
StoreDep = Annotated[NewsStore, Depends(get_store)]
ClientIpDep = Annotated[str, Depends(get_client_ip)]
