"""
modcache - Module Metadata Cache

Remembers, across builds, what a remote component repository reported
about a module version, so that dependency resolution can answer from
local storage instead of the network.
"""

__version__ = "0.1.0"
__author__ = "modcache Team"

from .services.modulecache import (
    CachedMetadata,
    DefaultCachedMetadata,
    DefaultModuleMetadataCache,
    ModuleMetadataCache,
)

__all__ = [
    "CachedMetadata",
    "DefaultCachedMetadata",
    "DefaultModuleMetadataCache",
    "ModuleMetadataCache",
]
