"""Path-keyed file store.

Stores one file per relative path beneath a base directory. Writes go to a
temporary file in the destination directory that is then renamed into
place, so readers never observe a partially written file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable

from modcache.shared.constants import SerializationConfig
from modcache.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    create_cache_write_error,
)

logger = logging.getLogger(__name__)


class PathKeyFileStore:
    """File store addressed by ``/``-separated relative paths."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def put(self, path_key: str, writer: Callable[[BinaryIO], None]) -> Path:
        """Atomically write the file for ``path_key``.

        Args:
            path_key: Relative path of the file beneath the base directory
            writer: Callback writing the file content to a binary stream

        Returns:
            Path of the written file

        Raises:
            DomainError: If ``path_key`` escapes the base directory
            InfrastructureError: If the file cannot be written
        """
        destination = self._resolve(path_key)
        temp_name: str | None = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=destination.parent,
                prefix=f".{destination.name}.",
                suffix=SerializationConfig.TEMP_FILE_SUFFIX,
            )
            with os.fdopen(fd, "wb") as handle:
                writer(handle)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, destination)
            temp_name = None
        except OSError as e:
            raise create_cache_write_error(str(destination), "file_store_put", e) from e
        finally:
            if temp_name is not None:
                Path(temp_name).unlink(missing_ok=True)

        logger.debug("Stored %s", destination)
        return destination

    def get(self, path_key: str) -> Path | None:
        """Return the file for ``path_key`` if it exists."""
        path = self._resolve(path_key)
        return path if path.is_file() else None

    def remove(self, path_key: str) -> bool:
        """Delete the file for ``path_key``; return True if it existed.

        Raises:
            InfrastructureError: If the file exists but cannot be deleted
        """
        path = self._resolve(path_key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise create_cache_write_error(str(path), "file_store_remove", e) from e
        return True

    def _resolve(self, path_key: str) -> Path:
        base = self.base_dir.resolve()
        path = (base / path_key).resolve()
        if path == base or base not in path.parents:
            raise DomainError(
                ErrorCode.INVALID_PATH,
                f"Path key escapes the file store: {path_key}",
                ErrorContext(
                    file_path=str(self.base_dir),
                    operation="resolve_path_key",
                ),
            )
        return path
