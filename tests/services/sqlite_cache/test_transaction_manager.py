"""Tests for the index TransactionManager and SchemaManager."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from modcache.services.sqlite_cache.migration import SchemaManager
from modcache.services.sqlite_cache.migration.manager import SCHEMA_VERSION
from modcache.services.sqlite_cache.transaction import TransactionManager


@pytest.fixture
def conn(tmp_path: Path) -> Generator[sqlite3.Connection, None, None]:
    """Autocommit connection with the index schema."""
    connection = sqlite3.connect(str(tmp_path / "index.db"), isolation_level=None)
    connection.execute("PRAGMA journal_mode=WAL")
    SchemaManager(connection).create_tables()
    yield connection
    connection.close()


def _count(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM entries").fetchone()[0]


class TestTransactionManager:
    """Test commit and rollback behavior."""

    def test_transaction_commits_on_success(self, conn: sqlite3.Connection) -> None:
        # Given
        transactions = TransactionManager(conn)

        # When
        with transactions.transaction():
            conn.execute("INSERT INTO entries VALUES (?, ?)", (b"k1", b"v1"))
            conn.execute("INSERT INTO entries VALUES (?, ?)", (b"k2", b"v2"))

        # Then
        assert _count(conn) == 2
        assert conn.in_transaction is False

    def test_transaction_rolls_back_on_error(self, conn: sqlite3.Connection) -> None:
        # Given
        transactions = TransactionManager(conn)

        # When
        with pytest.raises(sqlite3.IntegrityError):
            with transactions.transaction():
                conn.execute("INSERT INTO entries VALUES (?, ?)", (b"k1", b"v1"))
                conn.execute("INSERT INTO entries VALUES (?, ?)", (b"k1", b"v2"))

        # Then
        assert _count(conn) == 0
        assert conn.in_transaction is False


class TestSchemaManager:
    """Test schema creation and serializer checks."""

    def test_create_tables_records_version(self, conn: sqlite3.Connection) -> None:
        schema = SchemaManager(conn)

        schema.create_tables()

        assert schema.get_current_version() == SCHEMA_VERSION

    def test_first_signatures_are_recorded(self, conn: sqlite3.Connection) -> None:
        schema = SchemaManager(conn)

        assert schema.ensure_serializers("Key", "Value") is False
        assert schema.ensure_serializers("Key", "Value") is False

    def test_changed_signature_clears_entries(
        self, conn: sqlite3.Connection, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Given
        schema = SchemaManager(conn)
        schema.ensure_serializers("Key", "Value")
        conn.execute("INSERT INTO entries VALUES (?, ?)", (b"k", b"v"))

        # When
        cleared = schema.ensure_serializers("Key", "ValueV2")

        # Then
        assert cleared is True
        assert _count(conn) == 0
        assert "discarding existing entries" in caplog.text
