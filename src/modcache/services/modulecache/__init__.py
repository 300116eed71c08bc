"""Module metadata cache: key, entry, blob store, view and facade."""

from modcache.services.modulecache.cache import (
    DefaultModuleMetadataCache,
    ModuleMetadataCache,
)
from modcache.services.modulecache.cached_metadata import (
    CachedMetadata,
    DefaultCachedMetadata,
)
from modcache.services.modulecache.entry import (
    ModuleMetadataCacheEntry,
    ModuleMetadataCacheEntrySerializer,
)
from modcache.services.modulecache.key import (
    ModuleComponentAtRepositoryKey,
    RevisionKeySerializer,
)
from modcache.services.modulecache.store import ModuleMetadataStore

__all__ = [
    "CachedMetadata",
    "DefaultCachedMetadata",
    "DefaultModuleMetadataCache",
    "ModuleComponentAtRepositoryKey",
    "ModuleMetadataCache",
    "ModuleMetadataCacheEntry",
    "ModuleMetadataCacheEntrySerializer",
    "ModuleMetadataStore",
    "RevisionKeySerializer",
]
