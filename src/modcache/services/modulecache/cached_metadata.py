"""View returned by the module metadata cache."""

from __future__ import annotations

from abc import ABC, abstractmethod

from modcache.services.modulecache.entry import ModuleMetadataCacheEntry
from modcache.shared.models.metadata import ModuleSource, MutableModuleMetadata
from modcache.shared.protocols import TimeProvider


class CachedMetadata(ABC):
    """What the cache knows about one module version in one repository."""

    @property
    @abstractmethod
    def entry(self) -> ModuleMetadataCacheEntry: ...

    @property
    @abstractmethod
    def metadata(self) -> MutableModuleMetadata | None:
        """The cached metadata; None for missing modules."""

    @property
    @abstractmethod
    def age_millis(self) -> int:
        """Milliseconds between recording the entry and the build start."""

    @property
    def is_missing(self) -> bool:
        return self.entry.is_missing

    @property
    def is_changing(self) -> bool:
        return self.entry.is_changing

    @property
    def module_source(self) -> ModuleSource | None:
        return self.entry.external_resource


class DefaultCachedMetadata(CachedMetadata):
    """Immutable view pairing an entry with its (possibly absent) metadata."""

    __slots__ = ("_entry", "_metadata", "_time_provider")

    def __init__(
        self,
        entry: ModuleMetadataCacheEntry,
        metadata: MutableModuleMetadata | None,
        time_provider: TimeProvider,
    ) -> None:
        if entry.is_missing and metadata is not None:
            msg = "A missing-module entry cannot carry metadata"
            raise ValueError(msg)
        object.__setattr__(self, "_entry", entry)
        object.__setattr__(self, "_metadata", metadata)
        object.__setattr__(self, "_time_provider", time_provider)

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    @property
    def entry(self) -> ModuleMetadataCacheEntry:
        return self._entry

    @property
    def metadata(self) -> MutableModuleMetadata | None:
        return self._metadata

    @property
    def age_millis(self) -> int:
        return self._time_provider.get_current_time() - self._entry.create_timestamp

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DefaultCachedMetadata):
            return NotImplemented
        return self._entry == other._entry and self._metadata == other._metadata

    def __hash__(self) -> int:
        return hash(self._entry)

    def __repr__(self) -> str:
        return (
            f"DefaultCachedMetadata(missing={self.is_missing}, "
            f"changing={self.is_changing}, created={self._entry.create_timestamp})"
        )
