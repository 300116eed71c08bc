"""Service protocols for dependency inversion.

The module metadata cache consumes its collaborators through these small
interfaces, so that tests and alternative engines can stand in for the
SQLite index or the file lock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, Protocol, TypeVar

if TYPE_CHECKING:
    from modcache.services.serialization.serializers import Serializer
    from modcache.shared.models.identifiers import ModuleComponentIdentifier
    from modcache.shared.models.metadata import Dependency, MutableModuleMetadata

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")


class ModuleComponentRepository(Protocol):
    """A configured repository, known to the cache only by its opaque id."""

    @property
    def id(self) -> str: ...


class TimeProvider(Protocol):
    """Source of the timestamp used to stamp and age cache entries."""

    def get_current_time(self) -> int:
        """Return the current time in epoch milliseconds."""


class PersistentIndexedCache(Protocol, Generic[K, V]):
    """Persistent key-value mapping accessed under the shared cache lock."""

    def get(self, key: K) -> V | None: ...

    def put(self, key: K, value: V) -> None: ...

    def remove(self, key: K) -> None: ...

    def scan_prefix(self, prefix: bytes) -> list[tuple[K, V]]: ...


class CacheLockingManagerProtocol(Protocol):
    """Runs actions under the shared lock and creates persistent indexes."""

    def use_cache(self, action: Callable[[], R]) -> R: ...

    def create_cache(
        self,
        name: str,
        key_serializer: Serializer[K],
        value_serializer: Serializer[V],
    ) -> PersistentIndexedCache[K, V]: ...


class MetadataFormatFactory(Protocol):
    """Creates an empty mutable metadata object of one descriptor format."""

    format: str

    def create(
        self,
        component_id: ModuleComponentIdentifier,
        dependencies: list[Dependency] | None = None,
    ) -> MutableModuleMetadata: ...
