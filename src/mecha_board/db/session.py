"""Declarative base and async engine construction."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from mecha_board.db.events import install_slow_query_log


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(
    url: str,
    *,
    echo: bool = False,
    slow_query_threshold_ms: int = 1000,
    **engine_kwargs: Any,
) -> AsyncEngine:
    """Create an async engine with the shared connection hooks installed.

    Args:
        url: Async SQLAlchemy database URL.
        echo: Whether SQLAlchemy should echo every statement.
        slow_query_threshold_ms: Duration above which statements are logged as slow.
        **engine_kwargs: Extra keyword arguments for ``create_async_engine``.

    Returns:
        Configured async engine
    """
    engine = create_async_engine(url, echo=echo, **engine_kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    install_slow_query_log(engine.sync_engine, slow_query_threshold_ms)
    return engine


# Ensure model modules are imported so that metadata is populated before migrations run.
import mecha_board.models  # noqa: E402,F401
