"""
modcache Constants Module

Centralized constants for the modcache package.
"""

from .cache import (
    BASE_SECOND,
    MetadataDefaults,
    ModuleCacheConfig,
    SerializationConfig,
)
from .cli import CLIDefaults, CLIMessages

__all__ = [
    "BASE_SECOND",
    "CLIDefaults",
    "CLIMessages",
    "MetadataDefaults",
    "ModuleCacheConfig",
    "SerializationConfig",
]
