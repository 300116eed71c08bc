"""Tests for the dependency injection container."""

from __future__ import annotations

from pathlib import Path

from dependency_injector import providers

from modcache.config import Settings
from modcache.containers import Container
from modcache.services.modulecache import DefaultModuleMetadataCache
from modcache.shared.models import ModuleComponentIdentifier


def test_container_wires_cache_from_settings(tmp_path: Path, make_repository) -> None:
    # Given
    settings = Settings(cache={"cache_dir": tmp_path / "modules-2", "lock_timeout_seconds": 2})
    container = Container()
    container.config.override(providers.Object(settings))

    # When
    cache = container.module_metadata_cache()
    cache.record_missing(make_repository("R1"), ModuleComponentIdentifier("g", "m", "1"))

    # Then
    assert isinstance(cache, DefaultModuleMetadataCache)
    assert cache is container.module_metadata_cache()
    manager = container.cache_locking_manager()
    assert manager.lock_timeout == 2
    assert manager.index_dir == tmp_path / "modules-2" / "metadata-2.x"
    assert (manager.index_dir / "module-metadata.db").is_file()
    manager.close()
