"""Tests for identifiers, attribute containers and metadata factories."""

from __future__ import annotations

import threading

import pytest

from modcache.shared.errors import DomainError, ErrorCode
from modcache.shared.models import (
    AttributeContainer,
    Dependency,
    ImmutableModuleIdentifierFactory,
    IvyMutableModuleMetadataFactory,
    MavenMutableModuleMetadataFactory,
    ModuleComponentIdentifier,
    ModuleIdentifier,
)


class TestModuleComponentIdentifier:
    """Test component identifier value semantics."""

    def test_display_name_and_module(self) -> None:
        component_id = ModuleComponentIdentifier("com.x", "y", "1.0")

        assert str(component_id) == "com.x:y:1.0"
        assert component_id.module_identifier == ModuleIdentifier("com.x", "y")

    def test_parse(self) -> None:
        assert ModuleComponentIdentifier.parse(" com.x : y : 1.0 ") == ModuleComponentIdentifier(
            "com.x", "y", "1.0"
        )

    @pytest.mark.parametrize("notation", ["com.x:y", "com.x:y:1.0:jar", "com.x::1.0", ""])
    def test_parse_rejects_bad_notation(self, notation: str) -> None:
        with pytest.raises(DomainError) as exc_info:
            ModuleComponentIdentifier.parse(notation)

        assert exc_info.value.code == ErrorCode.INVALID_MODULE_IDENTIFIER


class TestImmutableModuleIdentifierFactory:
    """Test canonicalization and interning."""

    def test_equal_coordinates_are_interned(self) -> None:
        factory = ImmutableModuleIdentifierFactory()

        first = factory.component("com.x", "y", "1.0")
        second = factory.component(" com.x", "y ", "1.0")

        assert first is second
        assert factory.module("com.x", "y") is factory.module("com.x", "y")

    def test_canonicalize_returns_interned_instance(self) -> None:
        factory = ImmutableModuleIdentifierFactory()
        interned = factory.component("com.x", "y", "1.0")

        assert factory.canonicalize(ModuleComponentIdentifier("com.x", "y", "1.0")) is interned

    @pytest.mark.parametrize(
        ("group", "module", "version"),
        [("", "y", "1.0"), ("com.x", "..", "1.0"), ("com.x", "y", "1/0"), ("a\\b", "y", "1")],
    )
    def test_rejects_unsafe_coordinates(self, group: str, module: str, version: str) -> None:
        with pytest.raises(DomainError):
            ImmutableModuleIdentifierFactory().component(group, module, version)

    def test_concurrent_interning_yields_one_instance(self) -> None:
        # Given
        factory = ImmutableModuleIdentifierFactory()
        results: list[ModuleComponentIdentifier] = []

        # When
        threads = [
            threading.Thread(target=lambda: results.append(factory.component("g", "m", "1")))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Then
        assert len({id(result) for result in results}) == 1


class TestAttributeContainer:
    """Test the immutable attribute mapping."""

    def test_with_attribute_returns_new_container(self) -> None:
        base = AttributeContainer({"a": "x"})

        extended = base.with_attribute("b", 1)

        assert dict(base) == {"a": "x"}
        assert dict(extended) == {"a": "x", "b": 1}

    def test_equality_distinguishes_bool_from_int(self) -> None:
        assert AttributeContainer({"a": True}) != AttributeContainer({"a": 1})
        assert AttributeContainer({"a": 1}) == AttributeContainer({"a": 1})

    def test_rejects_unsupported_values(self) -> None:
        with pytest.raises(TypeError):
            AttributeContainer({"a": 1.5})  # type: ignore[dict-item]

    def test_integers_are_limited_to_64_bits(self) -> None:
        assert AttributeContainer({"max": 2**63 - 1, "min": -(2**63)})["min"] == -(2**63)
        with pytest.raises(ValueError):
            AttributeContainer({"n": 2**70})
        with pytest.raises(ValueError):
            AttributeContainer({"a": "x"}).with_attribute("n", 2**63)


class TestMetadataFactories:
    """Test format defaults."""

    def test_maven_release(self) -> None:
        metadata = MavenMutableModuleMetadataFactory().create(
            ModuleComponentIdentifier("g", "m", "1.0"), [Dependency("g", "d", "2.0")]
        )

        assert metadata.format == "maven"
        assert metadata.status == "release"
        assert metadata.is_changing is False
        assert metadata.packaging == "jar"
        assert metadata.dependencies == [Dependency("g", "d", "2.0")]

    def test_maven_snapshot_is_changing(self) -> None:
        metadata = MavenMutableModuleMetadataFactory().create(
            ModuleComponentIdentifier("g", "m", "1.0-SNAPSHOT")
        )

        assert metadata.status == "integration"
        assert metadata.is_changing is True

    def test_ivy_has_default_configuration(self) -> None:
        metadata = IvyMutableModuleMetadataFactory().create(ModuleComponentIdentifier("g", "m", "1"))

        assert metadata.format == "ivy"
        assert [c.name for c in metadata.configurations] == ["default"]
        assert metadata.status == "integration"
