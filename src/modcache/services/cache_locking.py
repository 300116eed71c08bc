"""Shared cache lock and index factory.

The locking manager serializes access to the persistent index and the
descriptor store: an in-process reentrant lock orders threads, and a file
lock beside the index orders processes sharing the same cache directory.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from filelock import FileLock, Timeout

from modcache.services.serialization.serializers import Serializer
from modcache.services.sqlite_cache.indexed_cache import SQLitePersistentIndexedCache
from modcache.shared.constants import ModuleCacheConfig
from modcache.shared.errors import (
    CacheConfigurationError,
    CacheLockError,
    ErrorCode,
    ErrorContext,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")


class DefaultCacheLockingManager:
    """Runs actions under the shared cache lock and owns the indexes.

    Example:
        >>> manager = DefaultCacheLockingManager(Path("~/.modcache/caches/modules-2"))
        >>> index = manager.create_cache("module-metadata", key_ser, value_ser)
        >>> manager.use_cache(lambda: index.get(key))
        >>> manager.close()
    """

    def __init__(
        self,
        cache_dir: Path,
        index_dir: Path | None = None,
        lock_timeout: float = ModuleCacheConfig.DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the locking manager.

        Args:
            cache_dir: Artifact cache directory holding the lock file
            index_dir: Directory for index databases (defaults to cache_dir)
            lock_timeout: Seconds to wait for the cross-process lock
        """
        self.cache_dir = Path(cache_dir)
        self.index_dir = Path(index_dir) if index_dir is not None else self.cache_dir
        self.lock_timeout = lock_timeout
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self._thread_lock = threading.RLock()
        self._local = threading.local()
        self._file_lock = FileLock(
            str(self.cache_dir / ModuleCacheConfig.LOCK_FILE_NAME),
            timeout=lock_timeout,
            thread_local=False,
        )
        self._caches: dict[
            str,
            tuple[Serializer[Any], Serializer[Any], SQLitePersistentIndexedCache[Any, Any]],
        ] = {}
        self._registry_lock = threading.Lock()
        self.lock_acquisitions = 0

    def use_cache(self, action: Callable[[], R]) -> R:
        """Run ``action`` under the shared lock and return its result.

        The lock is reentrant and is released on every exit path.

        Raises:
            CacheLockError: If the cross-process lock cannot be acquired
        """
        with self._thread_lock:
            depth = self._depth()
            if depth == 0:
                self._acquire_file_lock()
            self._local.depth = depth + 1
            try:
                return action()
            finally:
                self._local.depth = depth
                if depth == 0:
                    self._file_lock.release()

    def is_lock_held(self) -> bool:
        """Return True when the calling thread holds the shared lock."""
        return self._depth() > 0

    def assert_lock_held(self) -> None:
        """Raise CacheLockError unless the calling thread holds the lock."""
        if not self.is_lock_held():
            raise CacheLockError(
                code=ErrorCode.CACHE_NOT_LOCKED,
                message="Cache index accessed without holding the cache lock",
                context=ErrorContext(
                    operation="assert_lock_held",
                    file_path=str(self.cache_dir),
                ),
            )

    def create_cache(
        self,
        name: str,
        key_serializer: Serializer[K],
        value_serializer: Serializer[V],
    ) -> SQLitePersistentIndexedCache[K, V]:
        """Create, or return the already-open, persistent index ``name``.

        Raises:
            CacheConfigurationError: If ``name`` is already open with
                serializers that are not equal to the given ones
        """
        with self._registry_lock:
            existing = self._caches.get(name)
            if existing is not None:
                open_key_serializer, open_value_serializer, index = existing
                if open_key_serializer != key_serializer or open_value_serializer != value_serializer:
                    raise CacheConfigurationError(
                        code=ErrorCode.CACHE_SCHEMA_MISMATCH,
                        message=f"Index '{name}' is already open with different serializers",
                        context=ErrorContext(operation="create_cache"),
                    )
                return index

            index = SQLitePersistentIndexedCache(
                name,
                self.index_dir / f"{name}{ModuleCacheConfig.INDEX_FILE_SUFFIX}",
                key_serializer,
                value_serializer,
                lock_guard=self.assert_lock_held,
            )
            self._caches[name] = (key_serializer, value_serializer, index)
            logger.debug("Created index '%s' in %s", name, self.index_dir)
            return index

    def close(self) -> None:
        """Close every index opened by this manager."""
        with self._registry_lock:
            for _, _, index in self._caches.values():
                index.close()
            self._caches.clear()

    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    def _acquire_file_lock(self) -> None:
        try:
            self._file_lock.acquire()
        except Timeout as e:
            raise CacheLockError(
                code=ErrorCode.LOCK_ACQUISITION_FAILED,
                message=f"Timed out after {self.lock_timeout}s waiting for cache lock",
                context=ErrorContext(
                    file_path=self._file_lock.lock_file,
                    operation="use_cache",
                ),
                original_error=e,
            ) from e
        self.lock_acquisitions += 1
