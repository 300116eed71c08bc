"""Unit tests for SQLitePersistentIndexedCache.

Tests follow the Failure-First pattern:
1. Test failure cases first
2. Test edge cases
3. Test happy path
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from modcache.services.modulecache import (
    ModuleComponentAtRepositoryKey,
    ModuleMetadataCacheEntry,
    ModuleMetadataCacheEntrySerializer,
    RevisionKeySerializer,
)
from modcache.services.serialization import ComponentIdentifierSerializer
from modcache.services.sqlite_cache import SQLitePersistentIndexedCache
from modcache.services.sqlite_cache.migration.manager import SCHEMA_VERSION
from modcache.shared.errors import CacheLockError, ErrorCode, InfrastructureError
from modcache.shared.models import ModuleComponentIdentifier

Index = SQLitePersistentIndexedCache[ModuleComponentAtRepositoryKey, ModuleMetadataCacheEntry]


def _key(repository_id: str, version: str = "1.0") -> ModuleComponentAtRepositoryKey:
    return ModuleComponentAtRepositoryKey(
        repository_id, ModuleComponentIdentifier("org.example", "lib", version)
    )


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "metadata" / "module-metadata.db"


@pytest.fixture
def index(db_path: Path) -> Generator[Index, None, None]:
    cache = SQLitePersistentIndexedCache(
        "module-metadata",
        db_path,
        RevisionKeySerializer(),
        ModuleMetadataCacheEntrySerializer(),
    )
    yield cache
    cache.close()


class TestIndexedCacheFailures:
    """Failure cases."""

    def test_guard_rejects_unlocked_access(self, db_path: Path) -> None:
        # Given
        def guard() -> None:
            raise CacheLockError(ErrorCode.CACHE_NOT_LOCKED, "not locked")

        cache = SQLitePersistentIndexedCache(
            "module-metadata",
            db_path,
            RevisionKeySerializer(),
            ModuleMetadataCacheEntrySerializer(),
            lock_guard=guard,
        )

        # When & Then
        with pytest.raises(CacheLockError):
            cache.get(_key("central"))
        with pytest.raises(CacheLockError):
            cache.put(_key("central"), ModuleMetadataCacheEntry.for_missing(1))
        cache.close()

    def test_closed_index_raises(self, index: Index) -> None:
        index.close()

        with pytest.raises(InfrastructureError) as exc_info:
            index.get(_key("central"))

        assert exc_info.value.code == ErrorCode.CACHE_CLOSED

    def test_corrupt_value_is_removed_and_reported_absent(
        self, index: Index, db_path: Path
    ) -> None:
        # Given
        key = _key("central")
        index.put(key, ModuleMetadataCacheEntry.for_missing(1))
        conn = sqlite3.connect(db_path)
        conn.execute("UPDATE entries SET value = ?", (b"\x09garbage",))
        conn.commit()
        conn.close()

        # When
        result = index.get(key)

        # Then
        assert result is None
        conn = sqlite3.connect(db_path)
        assert conn.execute("SELECT COUNT(*) FROM entries").fetchone()[0] == 0
        conn.close()


class TestIndexedCacheSchema:
    """Serializer signature checks across sessions."""

    def test_newer_schema_version_is_refused(self, index: Index, db_path: Path) -> None:
        # Given
        index.close()
        conn = sqlite3.connect(db_path)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION + 1,))
        conn.commit()
        conn.close()

        # When
        with pytest.raises(InfrastructureError) as exc_info:
            SQLitePersistentIndexedCache(
                "module-metadata",
                db_path,
                RevisionKeySerializer(),
                ModuleMetadataCacheEntrySerializer(),
            )

        # Then
        assert exc_info.value.code == ErrorCode.CACHE_SCHEMA_MISMATCH
        assert f"schema version {SCHEMA_VERSION + 1}" in exc_info.value.message

    def test_changed_serializer_discards_entries(self, db_path: Path) -> None:
        # Given
        first = SQLitePersistentIndexedCache(
            "module-metadata",
            db_path,
            RevisionKeySerializer(),
            ModuleMetadataCacheEntrySerializer(),
        )
        first.put(_key("central"), ModuleMetadataCacheEntry.for_missing(1))
        first.close()

        # When
        second = SQLitePersistentIndexedCache(
            "module-metadata",
            db_path,
            ComponentIdentifierSerializer(),
            ModuleMetadataCacheEntrySerializer(),
        )

        # Then
        assert second.scan_prefix(b"") == []
        second.close()

    def test_same_serializers_keep_entries(self, db_path: Path) -> None:
        first = SQLitePersistentIndexedCache(
            "module-metadata",
            db_path,
            RevisionKeySerializer(),
            ModuleMetadataCacheEntrySerializer(),
        )
        first.put(_key("central"), ModuleMetadataCacheEntry.for_missing(1))
        first.close()

        second = SQLitePersistentIndexedCache(
            "module-metadata",
            db_path,
            RevisionKeySerializer(),
            ModuleMetadataCacheEntrySerializer(),
        )

        assert second.get(_key("central")) == ModuleMetadataCacheEntry.for_missing(1)
        second.close()


class TestIndexedCacheOperations:
    """Happy path operations."""

    def test_get_unknown_key_returns_none(self, index: Index) -> None:
        assert index.get(_key("central")) is None

    def test_put_replaces_previous_value(self, index: Index) -> None:
        # Given
        key = _key("central")
        index.put(key, ModuleMetadataCacheEntry.for_missing(1))

        # When
        present = ModuleMetadataCacheEntry(is_missing=False, create_timestamp=2)
        index.put(key, present)

        # Then
        assert index.get(key) == present

    def test_remove(self, index: Index) -> None:
        key = _key("central")
        index.put(key, ModuleMetadataCacheEntry.for_missing(1))

        index.remove(key)
        index.remove(key)

        assert index.get(key) is None

    def test_scan_prefix_is_scoped_to_repository(self, index: Index) -> None:
        # Given
        index.put(_key("central", "2.0"), ModuleMetadataCacheEntry.for_missing(1))
        index.put(_key("central", "1.0"), ModuleMetadataCacheEntry.for_missing(2))
        index.put(_key("central-mirror"), ModuleMetadataCacheEntry.for_missing(3))

        # When
        prefix = RevisionKeySerializer().repository_prefix("central")
        results = index.scan_prefix(prefix)

        # Then
        assert [key.component_id.version for key, _ in results] == ["1.0", "2.0"]
        assert {key.repository_id for key, _ in results} == {"central"}
