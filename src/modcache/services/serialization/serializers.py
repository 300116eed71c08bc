"""Serializers for component identifiers and attribute containers.

A serializer converts one value type to and from bytes. Two serializers
compare equal when they would read each other's output, which lets the
persistent index detect a changed format across sessions.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from modcache.services.serialization.encoder import Decoder, Encoder
from modcache.shared.constants import SerializationConfig
from modcache.shared.errors import CacheSerializationError, ErrorContext
from modcache.shared.models.attributes import AttributeContainer, AttributeValue
from modcache.shared.models.identifiers import ModuleComponentIdentifier

T = TypeVar("T")


class Serializer(Generic[T]):
    """Base serializer. Subclasses implement ``write`` and ``read``."""

    def write(self, encoder: Encoder, value: T) -> None:
        raise NotImplementedError

    def read(self, decoder: Decoder) -> T:
        raise NotImplementedError

    def to_bytes(self, value: T) -> bytes:
        encoder = Encoder()
        self.write(encoder, value)
        return encoder.to_bytes()

    def from_bytes(self, data: bytes) -> T:
        decoder = Decoder(data)
        value = self.read(decoder)
        decoder.finish()
        return value

    def signature(self) -> str:
        """Stable name of the format this serializer reads and writes."""
        return type(self).__qualname__

    def __eq__(self, other: object) -> bool:
        return other is not None and type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))


class ComponentIdentifierSerializer(Serializer[ModuleComponentIdentifier]):
    """Writes a type tag, then group, module and version."""

    def write(self, encoder: Encoder, value: ModuleComponentIdentifier) -> None:
        encoder.write_byte(SerializationConfig.COMPONENT_TYPE_MODULE)
        encoder.write_string(value.group)
        encoder.write_string(value.module)
        encoder.write_string(value.version)

    def read(self, decoder: Decoder) -> ModuleComponentIdentifier:
        tag = decoder.read_byte()
        if tag != SerializationConfig.COMPONENT_TYPE_MODULE:
            raise CacheSerializationError(
                f"Unknown component identifier type {tag}",
                ErrorContext(operation="read_component_identifier"),
            )
        group = decoder.read_string()
        module = decoder.read_string()
        version = decoder.read_string()
        return ModuleComponentIdentifier(group, module, version)


class AttributeContainerSerializer:
    """Converts attribute maps to and from the JSON-friendly form stored in
    metadata blobs, keeping an explicit value type per attribute."""

    _PYTHON_TYPES: dict[str, type] = {
        SerializationConfig.ATTRIBUTE_TYPE_STRING: str,
        SerializationConfig.ATTRIBUTE_TYPE_BOOLEAN: bool,
        SerializationConfig.ATTRIBUTE_TYPE_INTEGER: int,
    }

    def to_primitive(self, value: AttributeContainer) -> list[dict[str, Any]]:
        return [
            {"name": name, "type": self._type_name(attribute), "value": attribute}
            for name, attribute in value.items()
        ]

    def from_primitive(self, data: list[dict[str, Any]]) -> AttributeContainer:
        values: dict[str, AttributeValue] = {}
        for item in data:
            name = item["name"]
            type_name = item["type"]
            raw = item["value"]
            expected = self._PYTHON_TYPES.get(type_name)
            if expected is None or type(raw) is not expected:
                raise CacheSerializationError(
                    f"Attribute '{name}' does not hold a {type_name} value",
                    ErrorContext(operation="read_attributes"),
                )
            values[name] = raw
        return AttributeContainer(values)

    @staticmethod
    def _type_name(value: AttributeValue) -> str:
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return SerializationConfig.ATTRIBUTE_TYPE_BOOLEAN
        if isinstance(value, int):
            return SerializationConfig.ATTRIBUTE_TYPE_INTEGER
        return SerializationConfig.ATTRIBUTE_TYPE_STRING
