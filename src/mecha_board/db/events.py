"""Engine event hooks that time statements and log slow ones."""

from __future__ import annotations

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_STATEMENT_PREVIEW_CHARS = 200


def _preview(statement: str) -> str:
    flat = " ".join(statement.split())
    if len(flat) > _STATEMENT_PREVIEW_CHARS:
        return flat[:_STATEMENT_PREVIEW_CHARS] + "..."
    return flat


def install_slow_query_log(engine: Engine, threshold_ms: int) -> None:
    """Log a warning for every statement slower than ``threshold_ms``.

    Slow statements are only reported; they are never cancelled.
    """

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _stop_timer(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        started = conn.info["query_start_time"].pop()
        duration_ms = (time.perf_counter() - started) * 1000
        if duration_ms > threshold_ms:
            logger.warning(
                "Slow query detected (%.1f ms > %d ms): %s",
                duration_ms,
                threshold_ms,
                _preview(statement),
            )
        else:
            logger.debug("Query completed in %.1f ms", duration_ms)

    @event.listens_for(engine, "handle_error")
    def _discard_timer(exception_context: Any) -> None:
        # A failed statement never reaches after_cursor_execute.
        conn = exception_context.connection
        if conn is None or exception_context.cursor is None:
            return
        pending = conn.info.get("query_start_time")
        if pending:
            pending.pop()
