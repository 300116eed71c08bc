"""Module metadata cache facade.

Answers "what did repository R report about module version M?" from a
process-local in-memory map, falling back to the persistent index and the
descriptor blob store under the shared cache lock.

Lookup: in-memory -> index (locked) -> blob store (locked, present entries
only) -> view -> in-memory.
Write: blob store -> index -> in-memory, all under the lock. The blob is
persisted before the index entry, so a crash in between only leaves an
unreferenced blob behind.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from modcache.services.artifact_cache import ArtifactCacheMetadata
from modcache.services.file_store import PathKeyFileStore
from modcache.services.modulecache.cached_metadata import CachedMetadata, DefaultCachedMetadata
from modcache.services.modulecache.entry import (
    ModuleMetadataCacheEntry,
    ModuleMetadataCacheEntrySerializer,
)
from modcache.services.modulecache.key import ModuleComponentAtRepositoryKey, RevisionKeySerializer
from modcache.services.modulecache.store import ModuleMetadataStore
from modcache.services.serialization.metadata_serializer import ModuleMetadataSerializer
from modcache.services.serialization.serializers import AttributeContainerSerializer
from modcache.shared.constants import ModuleCacheConfig
from modcache.shared.errors import ErrorContext, InvalidCacheKeyError
from modcache.shared.logging import log_operation_success
from modcache.shared.models.identifiers import (
    ImmutableModuleIdentifierFactory,
    ModuleComponentIdentifier,
)
from modcache.shared.models.metadata import (
    IvyMutableModuleMetadataFactory,
    MavenMutableModuleMetadataFactory,
    MutableModuleMetadata,
)
from modcache.shared.protocols import (
    CacheLockingManagerProtocol,
    ModuleComponentRepository,
    PersistentIndexedCache,
    TimeProvider,
)

logger = logging.getLogger(__name__)


class ModuleMetadataCache(ABC):
    """Remembers repository answers about module versions across builds."""

    @abstractmethod
    def lookup(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
    ) -> CachedMetadata | None:
        """Return what is cached for ``component_id`` in ``repository``."""

    @abstractmethod
    def record_missing(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
    ) -> CachedMetadata:
        """Record that ``repository`` has no such module version."""

    @abstractmethod
    def record_metadata(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
        metadata: MutableModuleMetadata,
    ) -> CachedMetadata:
        """Record the metadata ``repository`` reported for the module version."""


class DefaultModuleMetadataCache(ModuleMetadataCache):
    """Two-tier module metadata cache.

    Attributes:
        time_provider: Build-started clock used to stamp and age entries
        cache_locking_manager: Shared lock and index factory
        module_metadata_store: Descriptor blob store
        in_memory_cache: Process-local views keyed by cache key

    Example:
        >>> cache = DefaultModuleMetadataCache(
        ...     BuildCommencedTimeProvider(),
        ...     DefaultCacheLockingManager(cache_dir),
        ...     ArtifactCacheMetadata(cache_dir),
        ...     ImmutableModuleIdentifierFactory(),
        ...     AttributeContainerSerializer(),
        ...     MavenMutableModuleMetadataFactory(),
        ...     IvyMutableModuleMetadataFactory(),
        ... )
        >>> cache.record_missing(repository, ModuleComponentIdentifier("com.x", "y", "1.0"))
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        cache_locking_manager: CacheLockingManagerProtocol,
        artifact_cache_metadata: ArtifactCacheMetadata,
        module_identifier_factory: ImmutableModuleIdentifierFactory,
        attribute_container_serializer: AttributeContainerSerializer,
        maven_metadata_factory: MavenMutableModuleMetadataFactory,
        ivy_metadata_factory: IvyMutableModuleMetadataFactory,
    ) -> None:
        self.time_provider = time_provider
        self.cache_locking_manager = cache_locking_manager
        self.module_metadata_store = ModuleMetadataStore(
            PathKeyFileStore(artifact_cache_metadata.metadata_store_directory),
            ModuleMetadataSerializer(
                attribute_container_serializer,
                (maven_metadata_factory, ivy_metadata_factory),
            ),
            module_identifier_factory,
        )
        self.in_memory_cache: dict[ModuleComponentAtRepositoryKey, CachedMetadata] = {}
        self._key_serializer = RevisionKeySerializer()
        # Created lazily so that constructing the facade never takes the lock.
        self._cache: PersistentIndexedCache[
            ModuleComponentAtRepositoryKey, ModuleMetadataCacheEntry
        ] | None = None

    def _get_cache(
        self,
    ) -> PersistentIndexedCache[ModuleComponentAtRepositoryKey, ModuleMetadataCacheEntry]:
        if self._cache is None:
            self._cache = self.cache_locking_manager.create_cache(
                ModuleCacheConfig.INDEX_NAME,
                self._key_serializer,
                ModuleMetadataCacheEntrySerializer(),
            )
        return self._cache

    def lookup(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
    ) -> CachedMetadata | None:
        key = self.create_key(repository, component_id)
        in_memory = self.in_memory_cache.get(key)
        if in_memory is not None:
            return in_memory
        return self._load_cached_metadata(key)

    def _load_cached_metadata(self, key: ModuleComponentAtRepositoryKey) -> CachedMetadata | None:
        # The in-memory tier is only written while the lock is held.
        def load() -> CachedMetadata | None:
            cache = self._get_cache()
            entry = cache.get(key)
            if entry is None:
                return None
            if entry.is_missing:
                cached_metadata = DefaultCachedMetadata(entry, None, self.time_provider)
            else:
                metadata = self.module_metadata_store.get_module_descriptor(key)
                if metadata is None:
                    logger.debug("Module descriptor for %s is gone, discarding index entry", key)
                    cache.remove(key)
                    return None
                cached_metadata = DefaultCachedMetadata(
                    entry, entry.configure(metadata), self.time_provider
                )
            self.in_memory_cache[key] = cached_metadata
            return cached_metadata

        return self.cache_locking_manager.use_cache(load)

    def record_missing(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
    ) -> CachedMetadata:
        key = self.create_key(repository, component_id)
        entry = ModuleMetadataCacheEntry.for_missing(self.time_provider.get_current_time())
        logger.debug(
            "Recording absence of module descriptor in cache: %s [changing = %s]",
            component_id,
            entry.is_changing,
        )

        def store() -> CachedMetadata:
            self._get_cache().put(key, entry)
            cached_metadata = DefaultCachedMetadata(entry, None, self.time_provider)
            self.in_memory_cache[key] = cached_metadata
            return cached_metadata

        return self.cache_locking_manager.use_cache(store)

    def record_metadata(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
        metadata: MutableModuleMetadata,
    ) -> CachedMetadata:
        key = self.create_key(repository, component_id)
        logger.debug(
            "Recording module descriptor in cache: %s [changing = %s]",
            metadata.component_id,
            metadata.is_changing,
        )
        started = time.perf_counter()

        def store() -> CachedMetadata:
            self.module_metadata_store.put_module_descriptor(key, metadata)
            entry = self.create_entry(metadata)
            self._get_cache().put(key, entry)
            cached_metadata = DefaultCachedMetadata(entry, metadata, self.time_provider)
            self.in_memory_cache[key] = cached_metadata
            return cached_metadata

        cached_metadata = self.cache_locking_manager.use_cache(store)
        log_operation_success(
            logger=logger,
            operation="record_metadata",
            duration_ms=(time.perf_counter() - started) * 1000,
            context={"key": str(key)},
        )
        return cached_metadata

    def entries_for_repository(
        self, repository_id: str
    ) -> list[tuple[ModuleComponentAtRepositoryKey, ModuleMetadataCacheEntry]]:
        """Return the index entries recorded for one repository."""
        prefix = self._key_serializer.repository_prefix(repository_id)
        return self.cache_locking_manager.use_cache(
            lambda: self._get_cache().scan_prefix(prefix)
        )

    def create_key(
        self,
        repository: ModuleComponentRepository,
        component_id: ModuleComponentIdentifier,
    ) -> ModuleComponentAtRepositoryKey:
        if repository is None or component_id is None:
            raise InvalidCacheKeyError(
                "Repository and component id are required",
                ErrorContext(operation="create_key"),
            )
        return ModuleComponentAtRepositoryKey(repository.id, component_id)

    def create_entry(self, metadata: MutableModuleMetadata) -> ModuleMetadataCacheEntry:
        return ModuleMetadataCacheEntry.for_metadata(
            metadata, self.time_provider.get_current_time()
        )
