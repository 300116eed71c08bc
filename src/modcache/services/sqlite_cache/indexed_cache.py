"""SQLite-backed persistent indexed cache.

Maps serialized keys to serialized values in a single table. Every access
first calls the lock guard supplied by the cache locking manager, so that
index reads and writes only ever happen under the shared cache lock.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Generic, TypeVar

from modcache.services.serialization.serializers import Serializer
from modcache.services.sqlite_cache.migration.manager import SCHEMA_VERSION, SchemaManager
from modcache.services.sqlite_cache.transaction.manager import TransactionManager
from modcache.shared.errors import (
    CacheSerializationError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class SQLitePersistentIndexedCache(Generic[K, V]):
    """Persistent ``key -> value`` mapping stored in one SQLite database.

    Values that can no longer be decoded are treated as absent and removed
    on the access that discovers them.

    Attributes:
        name: Index name
        db_path: Path to the SQLite database file
        key_serializer: Serializer for keys
        value_serializer: Serializer for values

    Example:
        >>> index = SQLitePersistentIndexedCache("module-metadata", path, key_ser, value_ser)
        >>> index.put(key, entry)
        >>> index.get(key)
        >>> index.close()
    """

    def __init__(
        self,
        name: str,
        db_path: Path,
        key_serializer: Serializer[K],
        value_serializer: Serializer[V],
        lock_guard: Callable[[], None] | None = None,
    ) -> None:
        """Open (creating if needed) the index database.

        Args:
            name: Index name
            db_path: Path to SQLite database file
            key_serializer: Serializer for keys
            value_serializer: Serializer for values
            lock_guard: Called before every access; raises if the shared
                lock is not held

        Raises:
            InfrastructureError: If database initialization fails
        """
        self.name = name
        self.db_path = Path(db_path)
        self.key_serializer = key_serializer
        self.value_serializer = value_serializer
        self._lock_guard = lock_guard
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,  # access is serialized by the cache lock
                isolation_level=None,
            )
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

            schema = SchemaManager(self.conn)
            schema.create_tables()
            version = schema.get_current_version()
            if version > SCHEMA_VERSION:
                self.close()
                raise InfrastructureError(
                    code=ErrorCode.CACHE_SCHEMA_MISMATCH,
                    message=(
                        f"Index '{self.name}' uses schema version {version}, "
                        f"newer than supported version {SCHEMA_VERSION}"
                    ),
                    context=ErrorContext(
                        file_path=str(self.db_path),
                        operation="initialize_index",
                    ),
                )
            self._transactions = TransactionManager(self.conn)
            with self._transactions.transaction():
                schema.ensure_serializers(
                    self.key_serializer.signature(),
                    self.value_serializer.signature(),
                )
        except (sqlite3.Error, OSError) as e:
            raise InfrastructureError(
                code=ErrorCode.FILE_ACCESS_ERROR,
                message=f"Failed to initialize index '{self.name}': {e!s}",
                context=ErrorContext(
                    file_path=str(self.db_path),
                    operation="initialize_index",
                ),
                original_error=e,
            ) from e

        logger.debug("Opened index '%s' at %s", self.name, self.db_path)

    def get(self, key: K) -> V | None:
        """Return the value stored for ``key``, or None."""
        conn = self._connection("get")
        encoded_key = self.key_serializer.to_bytes(key)
        try:
            row = conn.execute(
                "SELECT value FROM entries WHERE key = ?",
                (encoded_key,),
            ).fetchone()
        except sqlite3.Error as e:
            raise self._error(ErrorCode.CACHE_READ_FAILED, "get", e) from e
        if row is None:
            return None

        try:
            return self.value_serializer.from_bytes(row[0])
        except CacheSerializationError as e:
            logger.debug(
                "Discarding unreadable entry in index '%s' for %s: %s",
                self.name,
                key,
                e.message,
            )
            self._delete(conn, encoded_key, "get")
            return None

    def put(self, key: K, value: V) -> None:
        """Store ``value`` for ``key``, replacing any previous value."""
        conn = self._connection("put")
        encoded_key = self.key_serializer.to_bytes(key)
        encoded_value = self.value_serializer.to_bytes(value)
        try:
            with self._transactions.transaction():
                conn.execute(
                    "INSERT OR REPLACE INTO entries (key, value) VALUES (?, ?)",
                    (encoded_key, encoded_value),
                )
        except sqlite3.Error as e:
            raise self._error(ErrorCode.CACHE_WRITE_FAILED, "put", e) from e

    def remove(self, key: K) -> None:
        """Remove the entry for ``key`` if present."""
        conn = self._connection("remove")
        self._delete(conn, self.key_serializer.to_bytes(key), "remove")

    def scan_prefix(self, prefix: bytes) -> list[tuple[K, V]]:
        """Return decoded entries whose encoded key starts with ``prefix``.

        Entries are ordered by encoded key. Unreadable entries are removed.
        """
        conn = self._connection("scan_prefix")
        try:
            rows = conn.execute(
                "SELECT key, value FROM entries WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        except sqlite3.Error as e:
            raise self._error(ErrorCode.CACHE_READ_FAILED, "scan_prefix", e) from e

        results: list[tuple[K, V]] = []
        for encoded_key, encoded_value in rows:
            try:
                results.append(
                    (
                        self.key_serializer.from_bytes(encoded_key),
                        self.value_serializer.from_bytes(encoded_value),
                    )
                )
            except CacheSerializationError as e:
                logger.debug("Discarding unreadable entry in index '%s': %s", self.name, e.message)
                self._delete(conn, encoded_key, "scan_prefix")
        return results

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed index '%s': %s", self.name, self.db_path)

    def _connection(self, operation: str) -> sqlite3.Connection:
        if self._lock_guard is not None:
            self._lock_guard()
        if self.conn is None:
            raise InfrastructureError(
                code=ErrorCode.CACHE_CLOSED,
                message=f"Index '{self.name}' is closed",
                context=ErrorContext(operation=operation),
            )
        return self.conn

    def _delete(self, conn: sqlite3.Connection, encoded_key: bytes, operation: str) -> None:
        try:
            with self._transactions.transaction():
                conn.execute("DELETE FROM entries WHERE key = ?", (encoded_key,))
        except sqlite3.Error as e:
            raise self._error(ErrorCode.CACHE_WRITE_FAILED, operation, e) from e

    def _error(self, code: ErrorCode, operation: str, error: Exception) -> InfrastructureError:
        return InfrastructureError(
            code=code,
            message=f"Index '{self.name}' {operation} failed: {error!s}",
            context=ErrorContext(file_path=str(self.db_path), operation=operation),
            original_error=error,
        )
