"""Tests for the binary encoder and decoder."""

from __future__ import annotations

import pytest

from modcache.services.serialization import Decoder, Encoder
from modcache.shared.errors import CacheSerializationError, ErrorCode


class TestEncoder:
    """Test Encoder wire layout."""

    def test_string_is_length_prefixed_utf8(self) -> None:
        # Given
        encoder = Encoder()

        # When
        encoder.write_string("ü")

        # Then
        assert encoder.to_bytes() == b"\x00\x00\x00\x02\xc3\xbc"

    def test_long_is_big_endian(self) -> None:
        encoder = Encoder()
        encoder.write_long(1)
        assert encoder.to_bytes() == b"\x00" * 7 + b"\x01"

    def test_nullable_string_writes_presence_flag(self) -> None:
        encoder = Encoder()
        encoder.write_nullable_string(None)
        encoder.write_nullable_string("a")
        assert encoder.to_bytes() == b"\x00\x01\x00\x00\x00\x01a"

    def test_unencodable_string_raises(self) -> None:
        encoder = Encoder()

        with pytest.raises(CacheSerializationError) as exc_info:
            encoder.write_string("lone \ud800 surrogate")

        assert exc_info.value.code == ErrorCode.CACHE_SERIALIZATION_ERROR
        assert isinstance(exc_info.value.original_error, UnicodeEncodeError)
        assert encoder.to_bytes() == b""


class TestDecoder:
    """Test Decoder reading and failure cases."""

    def test_reads_values_in_order(self) -> None:
        # Given
        encoder = Encoder()
        encoder.write_byte(7)
        encoder.write_boolean(True)
        encoder.write_int(-5)
        encoder.write_long(1_700_000_000_000)
        encoder.write_nullable_string(None)
        encoder.write_string("module")

        # When
        decoder = Decoder(encoder.to_bytes())

        # Then
        assert decoder.read_byte() == 7
        assert decoder.read_boolean() is True
        assert decoder.read_int() == -5
        assert decoder.read_long() == 1_700_000_000_000
        assert decoder.read_nullable_string() is None
        assert decoder.read_string() == "module"
        decoder.finish()

    def test_truncated_input_raises(self) -> None:
        decoder = Decoder(b"\x00\x00\x00\x05ab")

        with pytest.raises(CacheSerializationError) as exc_info:
            decoder.read_string()

        assert exc_info.value.code == ErrorCode.CACHE_SERIALIZATION_ERROR

    def test_invalid_boolean_byte_raises(self) -> None:
        with pytest.raises(CacheSerializationError):
            Decoder(b"\x02").read_boolean()

    def test_negative_string_length_raises(self) -> None:
        with pytest.raises(CacheSerializationError):
            Decoder(b"\xff\xff\xff\xff").read_string()

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(CacheSerializationError) as exc_info:
            Decoder(b"\x00\x00\x00\x01\xff").read_string()

        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)

    def test_finish_rejects_trailing_bytes(self) -> None:
        decoder = Decoder(b"\x01\x02")
        decoder.read_byte()

        assert decoder.remaining == 1
        with pytest.raises(CacheSerializationError):
            decoder.finish()
