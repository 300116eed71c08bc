"""Artifact cache directory layout."""

from __future__ import annotations

from pathlib import Path

from modcache.shared.constants import ModuleCacheConfig


class ArtifactCacheMetadata:
    """Locates the directories of one artifact cache.

    Attributes:
        cache_dir: Root of the artifact cache
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir).expanduser()

    @property
    def metadata_directory(self) -> Path:
        """Directory holding the persistent index."""
        return self.cache_dir / ModuleCacheConfig.METADATA_DIR

    @property
    def metadata_store_directory(self) -> Path:
        """Directory holding one descriptor blob per module version."""
        return self.metadata_directory / ModuleCacheConfig.DESCRIPTORS_DIR

    @classmethod
    def default_cache_dir(cls) -> Path:
        return (
            Path.home()
            / ModuleCacheConfig.HOME_DIR
            / ModuleCacheConfig.CACHES_DIR
            / ModuleCacheConfig.ARTIFACT_CACHE_DIR
        )
