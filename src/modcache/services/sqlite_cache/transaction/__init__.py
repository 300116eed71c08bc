"""SQLite index transaction module."""

from modcache.services.sqlite_cache.transaction.manager import TransactionManager

__all__ = ["TransactionManager"]
