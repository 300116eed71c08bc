"""Descriptor blob store for cached module metadata."""

from __future__ import annotations

import logging

from modcache.services.file_store import PathKeyFileStore
from modcache.services.modulecache.key import ModuleComponentAtRepositoryKey
from modcache.services.serialization.metadata_serializer import ModuleMetadataSerializer
from modcache.shared.constants import ModuleCacheConfig
from modcache.shared.errors import (
    CacheSerializationError,
    InfrastructureError,
    create_cache_write_error,
)
from modcache.shared.models.identifiers import ImmutableModuleIdentifierFactory
from modcache.shared.models.metadata import MutableModuleMetadata

logger = logging.getLogger(__name__)


class ModuleMetadataStore:
    """Reads and writes one metadata blob per module version.

    The blob path is derived from the component identity only. The same
    module version fetched from two mirrors yields the same metadata, so
    the repository id is not part of the path.
    """

    def __init__(
        self,
        file_store: PathKeyFileStore,
        serializer: ModuleMetadataSerializer,
        module_identifier_factory: ImmutableModuleIdentifierFactory,
    ) -> None:
        self.file_store = file_store
        self.serializer = serializer
        self.module_identifier_factory = module_identifier_factory

    def get_module_descriptor(
        self, key: ModuleComponentAtRepositoryKey
    ) -> MutableModuleMetadata | None:
        """Load the blob for ``key``; None if it is absent or corrupt."""
        path_key = self.get_file_path(key)
        path = self.file_store.get(path_key)
        if path is None:
            return None
        try:
            return self.serializer.read(path.read_bytes())
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug("Ignoring unreadable module descriptor %s: %s", path, e)
            return None
        except CacheSerializationError as e:
            logger.debug("Discarding corrupt module descriptor %s: %s", path, e.message)
            try:
                self.file_store.remove(path_key)
            except InfrastructureError as remove_error:
                logger.debug("Could not remove %s: %s", path, remove_error.message)
            return None

    def put_module_descriptor(
        self,
        key: ModuleComponentAtRepositoryKey,
        metadata: MutableModuleMetadata,
    ) -> None:
        """Write the blob for ``key``, replacing any previous one."""
        path_key = self.get_file_path(key)
        try:
            data = self.serializer.write(metadata)
        except CacheSerializationError as e:
            raise create_cache_write_error(path_key, "put_module_descriptor", e) from e
        self.file_store.put(path_key, lambda handle: handle.write(data))

    def get_file_path(self, key: ModuleComponentAtRepositoryKey) -> str:
        component = self.module_identifier_factory.canonicalize(key.component_id)
        return "/".join(
            (
                component.group,
                component.module,
                component.version,
                ModuleCacheConfig.DESCRIPTOR_FILE_NAME,
            )
        )
