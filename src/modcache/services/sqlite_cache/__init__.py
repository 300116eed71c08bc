"""SQLite persistent index with separated schema and transaction handling."""

from modcache.services.sqlite_cache.indexed_cache import SQLitePersistentIndexedCache

__all__ = ["SQLitePersistentIndexedCache"]
