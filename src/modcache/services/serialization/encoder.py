"""Binary encoder and decoder for index keys and values.

All multi-byte values are big-endian. Strings are written as a 4-byte
length followed by their UTF-8 bytes.
"""

from __future__ import annotations

import struct

from modcache.shared.errors import CacheSerializationError, ErrorContext

_INT = struct.Struct(">i")
_LONG = struct.Struct(">q")


class Encoder:
    """Accumulates encoded values into a byte buffer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_byte(self, value: int) -> None:
        self._buffer.append(value & 0xFF)

    def write_boolean(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_int(self, value: int) -> None:
        self._buffer += _INT.pack(value)

    def write_long(self, value: int) -> None:
        self._buffer += _LONG.pack(value)

    def write_string(self, value: str) -> None:
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise CacheSerializationError(
                f"String is not encodable as UTF-8: {e.reason}",
                ErrorContext(operation="write_string"),
                original_error=e,
            ) from e
        self.write_int(len(data))
        self._buffer += data

    def write_nullable_string(self, value: str | None) -> None:
        if value is None:
            self.write_boolean(False)
        else:
            self.write_boolean(True)
            self.write_string(value)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class Decoder:
    """Reads values written by :class:`Encoder`.

    Truncated or malformed input raises :class:`CacheSerializationError`.
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_boolean(self) -> bool:
        value = self.read_byte()
        if value not in (0, 1):
            raise self._error(f"Invalid boolean byte {value}")
        return value == 1

    def read_int(self) -> int:
        return _INT.unpack(self._take(_INT.size))[0]

    def read_long(self) -> int:
        return _LONG.unpack(self._take(_LONG.size))[0]

    def read_string(self) -> str:
        length = self.read_int()
        if length < 0:
            raise self._error(f"Negative string length {length}")
        raw = self._take(length)
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CacheSerializationError(
                "Invalid UTF-8 string in encoded data",
                ErrorContext(operation="decode", additional_data={"offset": self._offset}),
                original_error=e,
            ) from e

    def read_nullable_string(self) -> str | None:
        if self.read_boolean():
            return self.read_string()
        return None

    def finish(self) -> None:
        """Assert that all input was consumed."""
        if self.remaining:
            raise self._error(f"{self.remaining} trailing bytes")

    def _take(self, size: int) -> memoryview:
        end = self._offset + size
        if end > len(self._data):
            raise self._error(f"Unexpected end of data reading {size} bytes")
        chunk = self._data[self._offset : end]
        self._offset = end
        return chunk

    def _error(self, message: str) -> CacheSerializationError:
        return CacheSerializationError(
            message,
            ErrorContext(operation="decode", additional_data={"offset": self._offset}),
        )
