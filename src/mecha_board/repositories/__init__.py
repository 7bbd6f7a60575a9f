"""Data access layer."""

from .news_store import NewsStore, PostgresNewsStore, SQLiteNewsStore, managed_store, open_store

__all__ = ["NewsStore", "PostgresNewsStore", "SQLiteNewsStore", "managed_store", "open_store"]
