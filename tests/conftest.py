"""
Pytest configuration and shared fixtures for modcache tests.

This module provides the fixtures used across the test modules: a temporary
artifact cache, a locking manager over it and a factory for metadata cache
facades wired the same way the application container wires them.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path

import pytest

from modcache.services.artifact_cache import ArtifactCacheMetadata
from modcache.services.cache_locking import DefaultCacheLockingManager
from modcache.services.modulecache import DefaultModuleMetadataCache
from modcache.services.serialization import AttributeContainerSerializer
from modcache.services.time_provider import BuildCommencedTimeProvider
from modcache.shared.models import (
    ImmutableModuleIdentifierFactory,
    IvyMutableModuleMetadataFactory,
    MavenMutableModuleMetadataFactory,
    ModuleComponentIdentifier,
)

BUILD_START_MILLIS = 1_700_000_000_000


@dataclass(frozen=True)
class FakeRepository:
    """Repository stand-in exposing only its id."""

    id: str


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Root of a fresh artifact cache."""
    return tmp_path / "modules-2"


@pytest.fixture
def artifact_cache_metadata(cache_dir: Path) -> ArtifactCacheMetadata:
    return ArtifactCacheMetadata(cache_dir)


@pytest.fixture
def time_provider() -> BuildCommencedTimeProvider:
    return BuildCommencedTimeProvider(BUILD_START_MILLIS)


@pytest.fixture
def locking_manager(
    artifact_cache_metadata: ArtifactCacheMetadata,
) -> Generator[DefaultCacheLockingManager, None, None]:
    """Locking manager over the temporary artifact cache."""
    manager = DefaultCacheLockingManager(
        artifact_cache_metadata.cache_dir,
        index_dir=artifact_cache_metadata.metadata_directory,
        lock_timeout=5,
    )
    yield manager
    manager.close()


@pytest.fixture
def maven_factory() -> MavenMutableModuleMetadataFactory:
    return MavenMutableModuleMetadataFactory()


@pytest.fixture
def ivy_factory() -> IvyMutableModuleMetadataFactory:
    return IvyMutableModuleMetadataFactory()


@pytest.fixture
def make_cache(
    artifact_cache_metadata: ArtifactCacheMetadata,
    time_provider: BuildCommencedTimeProvider,
    maven_factory: MavenMutableModuleMetadataFactory,
    ivy_factory: IvyMutableModuleMetadataFactory,
) -> Generator[Callable[..., DefaultModuleMetadataCache], None, None]:
    """Factory creating facades over the temporary artifact cache.

    Every call opens its own locking manager unless one is passed in, which
    is how a later build session sees the cache.
    """
    managers: list[DefaultCacheLockingManager] = []

    def _make(
        manager: DefaultCacheLockingManager | None = None,
        provider: BuildCommencedTimeProvider | None = None,
    ) -> DefaultModuleMetadataCache:
        if manager is None:
            manager = DefaultCacheLockingManager(
                artifact_cache_metadata.cache_dir,
                index_dir=artifact_cache_metadata.metadata_directory,
                lock_timeout=5,
            )
            managers.append(manager)
        return DefaultModuleMetadataCache(
            provider or time_provider,
            manager,
            artifact_cache_metadata,
            ImmutableModuleIdentifierFactory(),
            AttributeContainerSerializer(),
            maven_factory,
            ivy_factory,
        )

    yield _make
    for manager in managers:
        manager.close()


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository("central")


@pytest.fixture
def component_id() -> ModuleComponentIdentifier:
    return ModuleComponentIdentifier("org.example", "lib", "1.0")


@pytest.fixture
def make_repository() -> Callable[[str], FakeRepository]:
    return FakeRepository
