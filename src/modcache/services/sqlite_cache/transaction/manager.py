"""Transaction manager for the SQLite index.

This module provides transaction management for index writes.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)


class TransactionManager:
    """Transaction management for index operations."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize transaction manager.

        Args:
            conn: SQLite database connection in autocommit mode
        """
        self.conn = conn

    def begin(self) -> None:
        """Begin a transaction, taking the write lock immediately."""
        self.conn.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        """Commit the current transaction."""
        self.conn.execute("COMMIT")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.conn.execute("ROLLBACK")

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for transactions.

        Automatically commits on success or rolls back on exception.

        Example:
            >>> with transaction_manager.transaction():
            ...     conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            ...     conn.execute("INSERT INTO entries VALUES (?, ?)", (key, value))
        """
        self.begin()
        try:
            yield
            self.commit()
        except Exception:
            logger.debug("Rolling back index transaction")
            self.rollback()
            raise
