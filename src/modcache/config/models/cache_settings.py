"""Cache configuration model.

This module contains the configuration model for the location of the
artifact cache and the behavior of the shared cache lock.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from modcache.services.artifact_cache import ArtifactCacheMetadata
from modcache.shared.constants import ModuleCacheConfig


class CacheSettings(BaseModel):
    """Module metadata cache configuration."""

    cache_dir: Path = Field(
        default_factory=ArtifactCacheMetadata.default_cache_dir,
        description="Artifact cache directory holding the index and descriptors",
    )
    lock_timeout_seconds: float = Field(
        default=ModuleCacheConfig.DEFAULT_LOCK_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds to wait for the cross-process cache lock",
    )


__all__ = ["CacheSettings"]
