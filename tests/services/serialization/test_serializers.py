"""Tests for component identifier and attribute container serializers."""

from __future__ import annotations

import pytest

from modcache.services.serialization import (
    AttributeContainerSerializer,
    ComponentIdentifierSerializer,
)
from modcache.services.serialization.serializers import Serializer
from modcache.shared.errors import CacheSerializationError
from modcache.shared.models import AttributeContainer, ModuleComponentIdentifier


class TestComponentIdentifierSerializer:
    """Test ComponentIdentifierSerializer."""

    def test_reads_back_identifier(self) -> None:
        # Given
        serializer = ComponentIdentifierSerializer()
        component_id = ModuleComponentIdentifier("org.example", "lib", "1.0")

        # When
        data = serializer.to_bytes(component_id)

        # Then
        assert data[0] == 1
        assert serializer.from_bytes(data) == component_id

    def test_unknown_type_tag_raises(self) -> None:
        serializer = ComponentIdentifierSerializer()
        data = b"\x09" + serializer.to_bytes(ModuleComponentIdentifier("g", "m", "v"))[1:]

        with pytest.raises(CacheSerializationError, match="Unknown component identifier type 9"):
            serializer.from_bytes(data)

    def test_trailing_bytes_raise(self) -> None:
        serializer = ComponentIdentifierSerializer()
        data = serializer.to_bytes(ModuleComponentIdentifier("g", "m", "v")) + b"\x00"

        with pytest.raises(CacheSerializationError):
            serializer.from_bytes(data)

    def test_serializers_of_same_type_are_equal(self) -> None:
        assert ComponentIdentifierSerializer() == ComponentIdentifierSerializer()
        assert ComponentIdentifierSerializer() != Serializer()
        assert hash(ComponentIdentifierSerializer()) == hash(ComponentIdentifierSerializer())


class TestAttributeContainerSerializer:
    """Test the attribute form stored in metadata blobs."""

    def test_primitive_form_names_types(self) -> None:
        serializer = AttributeContainerSerializer()
        attributes = AttributeContainer({"a": "x", "b": True, "c": 3})

        primitive = serializer.to_primitive(attributes)

        assert primitive == [
            {"name": "a", "type": "string", "value": "x"},
            {"name": "b", "type": "boolean", "value": True},
            {"name": "c", "type": "integer", "value": 3},
        ]
        assert serializer.from_primitive(primitive) == attributes

    def test_primitive_type_mismatch_raises(self) -> None:
        serializer = AttributeContainerSerializer()

        with pytest.raises(CacheSerializationError):
            serializer.from_primitive([{"name": "a", "type": "integer", "value": True}])

    def test_unknown_primitive_type_raises(self) -> None:
        serializer = AttributeContainerSerializer()

        with pytest.raises(CacheSerializationError):
            serializer.from_primitive([{"name": "a", "type": "float", "value": None}])
