"""Schema manager for the SQLite index.

Creates the index tables and checks that the serializers recorded by an
earlier session match the ones used now. Entries written in another format
are discarded rather than migrated.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_KEY_SERIALIZER = "key_serializer"
_VALUE_SERIALIZER = "value_serializer"


class SchemaManager:
    """Index schema creation and compatibility checks."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize schema manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn

    def create_tables(self) -> None:
        """Create database schema (v1)."""
        schema_sql = """
        CREATE TABLE IF NOT EXISTS entries (
            key BLOB PRIMARY KEY,
            value BLOB NOT NULL
        );

        CREATE TABLE IF NOT EXISTS cache_meta (
            name TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
        );
        """
        self.conn.executescript(schema_sql)
        self.conn.execute(
            "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )

    def get_current_version(self) -> int:
        """Get current schema version (0 if not set)."""
        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def ensure_serializers(self, key_signature: str, value_signature: str) -> bool:
        """Record serializer signatures, clearing entries written by others.

        Args:
            key_signature: Signature of the key serializer in use
            value_signature: Signature of the value serializer in use

        Returns:
            True if existing entries were discarded
        """
        stored = dict(self.conn.execute("SELECT name, value FROM cache_meta").fetchall())
        expected = {_KEY_SERIALIZER: key_signature, _VALUE_SERIALIZER: value_signature}
        if stored == expected:
            return False

        cleared = bool(stored)
        if cleared:
            logger.warning(
                "Index serializers changed (%s -> %s), discarding existing entries",
                stored,
                expected,
            )
            self.conn.execute("DELETE FROM entries")
        self.conn.executemany(
            "INSERT OR REPLACE INTO cache_meta (name, value) VALUES (?, ?)",
            list(expected.items()),
        )
        return cleared
