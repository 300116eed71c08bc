"""Protocol interfaces consumed by the module metadata cache."""

from modcache.shared.protocols.services import (
    CacheLockingManagerProtocol,
    MetadataFormatFactory,
    ModuleComponentRepository,
    PersistentIndexedCache,
    TimeProvider,
)

__all__ = [
    "CacheLockingManagerProtocol",
    "MetadataFormatFactory",
    "ModuleComponentRepository",
    "PersistentIndexedCache",
    "TimeProvider",
]
