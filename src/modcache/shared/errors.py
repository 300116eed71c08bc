"""modcache Error Handling Module

This module defines the error handling system for modcache, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for modcache.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # File System Errors
    INVALID_PATH = "INVALID_PATH"
    FILE_ACCESS_ERROR = "FILE_ACCESS_ERROR"

    # Key Errors
    INVALID_CACHE_KEY = "INVALID_CACHE_KEY"
    INVALID_MODULE_IDENTIFIER = "INVALID_MODULE_IDENTIFIER"

    # Cache Errors
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"
    CACHE_NOT_LOCKED = "CACHE_NOT_LOCKED"
    CACHE_SCHEMA_MISMATCH = "CACHE_SCHEMA_MISMATCH"
    CACHE_CLOSED = "CACHE_CLOSED"

    # Locking Errors
    LOCK_ACQUISITION_FAILED = "LOCK_ACQUISITION_FAILED"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization into structured logs.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict, always including additional_data."""
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = dict(self.additional_data or {})
        return data


class ModCacheError(Exception):
    """Base exception class for all modcache errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ModCacheError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(ModCacheError):
    """Domain-specific errors.

    These errors occur when cache rules are violated or inputs do not
    satisfy domain constraints.

    Examples:
    - Null or empty repository identifiers
    - Module coordinates that cannot be used as a storage path
    """


class InfrastructureError(ModCacheError):
    """Infrastructure-related errors.

    These errors occur when interacting with the file system, the
    persistent index, or the cross-process lock.
    """


class ApplicationError(ModCacheError):
    """Application-level errors such as invalid wiring or configuration."""


class InvalidCacheKeyError(DomainError):
    """Raised when a cache key is built from a missing or empty identity."""

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        super().__init__(ErrorCode.INVALID_CACHE_KEY, message, context)


class CacheSerializationError(DomainError):
    """Raised when a persisted index value or blob cannot be decoded."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.CACHE_SERIALIZATION_ERROR,
            message,
            context,
            original_error,
        )


class CacheLockError(InfrastructureError):
    """Raised when the shared cache lock cannot be acquired or is not held."""


class CacheConfigurationError(ApplicationError):
    """Raised when an index is requested with incompatible serializers."""


def create_cache_write_error(
    file_path: str,
    operation: str,
    original_error: Exception,
) -> InfrastructureError:
    """Create a cache write failure error with context."""
    context = ErrorContext(
        file_path=file_path,
        operation=operation,
    )
    return InfrastructureError(
        ErrorCode.CACHE_WRITE_FAILED,
        f"Failed to write cache file: {file_path}",
        context,
        original_error,
    )
