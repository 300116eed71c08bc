"""Dependency Injection container for modcache.

This module wires the module metadata cache and its collaborators using
dependency-injector.

The container manages:
- Settings (Singleton)
- Build-started time provider (Singleton)
- Cache locking manager and artifact cache layout (Singleton)
- Identifier factory, metadata factories and attribute serializer
- Module metadata cache facade (Singleton)
"""

from __future__ import annotations

from dependency_injector import containers, providers

from modcache.config.loader import load_settings
from modcache.services.artifact_cache import ArtifactCacheMetadata
from modcache.services.cache_locking import DefaultCacheLockingManager
from modcache.services.modulecache import DefaultModuleMetadataCache
from modcache.services.serialization import AttributeContainerSerializer
from modcache.services.time_provider import BuildCommencedTimeProvider
from modcache.shared.models import (
    ImmutableModuleIdentifierFactory,
    IvyMutableModuleMetadataFactory,
    MavenMutableModuleMetadataFactory,
)


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for modcache services.

    Example:
        >>> container = Container()
        >>> container.config.override(providers.Object(Settings(cache={"cache_dir": path})))
        >>> cache = container.module_metadata_cache()
        >>> cache.lookup(repository, component_id)
        >>> container.cache_locking_manager().close()
    """

    config = providers.Singleton(load_settings)

    time_provider = providers.Singleton(BuildCommencedTimeProvider)

    artifact_cache_metadata = providers.Singleton(
        ArtifactCacheMetadata,
        cache_dir=providers.Callable(lambda config: config.cache.cache_dir, config=config),
    )

    cache_locking_manager = providers.Singleton(
        DefaultCacheLockingManager,
        cache_dir=providers.Callable(lambda meta: meta.cache_dir, meta=artifact_cache_metadata),
        index_dir=providers.Callable(
            lambda meta: meta.metadata_directory, meta=artifact_cache_metadata
        ),
        lock_timeout=providers.Callable(
            lambda config: config.cache.lock_timeout_seconds, config=config
        ),
    )

    module_identifier_factory = providers.Singleton(ImmutableModuleIdentifierFactory)
    attribute_container_serializer = providers.Singleton(AttributeContainerSerializer)
    maven_metadata_factory = providers.Singleton(MavenMutableModuleMetadataFactory)
    ivy_metadata_factory = providers.Singleton(IvyMutableModuleMetadataFactory)

    module_metadata_cache = providers.Singleton(
        DefaultModuleMetadataCache,
        time_provider=time_provider,
        cache_locking_manager=cache_locking_manager,
        artifact_cache_metadata=artifact_cache_metadata,
        module_identifier_factory=module_identifier_factory,
        attribute_container_serializer=attribute_container_serializer,
        maven_metadata_factory=maven_metadata_factory,
        ivy_metadata_factory=ivy_metadata_factory,
    )
