"""SQLite index schema module."""

from modcache.services.sqlite_cache.migration.manager import SchemaManager

__all__ = ["SchemaManager"]
