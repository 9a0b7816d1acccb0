"""
Persistence module.

SQLite key-value store and the watchlist repository built on it.
"""

from .watchlist_store import KeyValueStore, WatchlistStore

__all__ = ["KeyValueStore", "WatchlistStore"]
