"""Serializer for module metadata blobs.

Blobs are orjson documents carrying a ``format`` discriminator. On read the
matching format factory creates the metadata object, which is then filled
from the document. The changing flag and module source belong to the cache
entry and are not written here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import orjson

from modcache.services.serialization.serializers import AttributeContainerSerializer
from modcache.shared.constants import SerializationConfig
from modcache.shared.errors import CacheSerializationError, ErrorContext
from modcache.shared.models.identifiers import ModuleComponentIdentifier
from modcache.shared.models.metadata import (
    Artifact,
    Configuration,
    Dependency,
    MutableIvyModuleMetadata,
    MutableMavenModuleMetadata,
    MutableModuleMetadata,
)
from modcache.shared.protocols import MetadataFormatFactory


class ModuleMetadataSerializer:
    """Converts mutable module metadata to and from blob bytes."""

    def __init__(
        self,
        attribute_container_serializer: AttributeContainerSerializer,
        factories: Iterable[MetadataFormatFactory],
    ) -> None:
        self._attributes = attribute_container_serializer
        self._factories = {factory.format: factory for factory in factories}

    def write(self, metadata: MutableModuleMetadata) -> bytes:
        if metadata.format not in self._factories:
            raise CacheSerializationError(
                f"No metadata factory registered for format '{metadata.format}'",
                ErrorContext(
                    operation="write_metadata",
                    additional_data={"component": metadata.component_id.display_name},
                ),
            )
        document: dict[str, Any] = {
            "formatVersion": SerializationConfig.BLOB_FORMAT_VERSION,
            "format": metadata.format,
            "id": _component_to_primitive(metadata.component_id),
            "status": metadata.status,
            "statusScheme": list(metadata.status_scheme),
            "contentHash": metadata.content_hash,
            "attributes": self._attributes.to_primitive(metadata.attributes),
            "dependencies": [_dependency_to_primitive(d) for d in metadata.dependencies],
            "artifacts": [_artifact_to_primitive(a) for a in metadata.artifacts],
        }
        if isinstance(metadata, MutableIvyModuleMetadata):
            document["configurations"] = [
                {
                    "name": c.name,
                    "extendsFrom": list(c.extends_from),
                    "visible": c.visible,
                    "transitive": c.transitive,
                }
                for c in metadata.configurations
            ]
            document["branch"] = metadata.branch
            document["extraAttributes"] = dict(metadata.extra_attributes)
        elif isinstance(metadata, MutableMavenModuleMetadata):
            document["packaging"] = metadata.packaging
            document["snapshotTimestamp"] = metadata.snapshot_timestamp
            document["relocated"] = metadata.relocated
        try:
            return orjson.dumps(document)
        except orjson.JSONEncodeError as e:
            raise CacheSerializationError(
                f"Module metadata cannot be encoded: {e!s}",
                ErrorContext(
                    operation="write_metadata",
                    additional_data={"component": metadata.component_id.display_name},
                ),
                original_error=e,
            ) from e

    def read(self, data: bytes) -> MutableModuleMetadata:
        """Rebuild metadata from blob bytes.

        Raises:
            CacheSerializationError: If the blob is not a readable document
        """
        try:
            document = orjson.loads(data)
            return self._from_document(document)
        except CacheSerializationError:
            raise
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise CacheSerializationError(
                f"Corrupt module metadata blob: {e!s}",
                ErrorContext(operation="read_metadata"),
                original_error=e,
            ) from e

    def _from_document(self, document: dict[str, Any]) -> MutableModuleMetadata:
        version = document["formatVersion"]
        if version != SerializationConfig.BLOB_FORMAT_VERSION:
            raise CacheSerializationError(
                f"Unsupported metadata blob version {version}",
                ErrorContext(operation="read_metadata"),
            )
        factory = self._factories.get(document["format"])
        if factory is None:
            raise CacheSerializationError(
                f"Unknown metadata format '{document['format']}'",
                ErrorContext(operation="read_metadata"),
            )

        metadata = factory.create(_component_from_primitive(document["id"]))
        metadata.status = document["status"]
        metadata.status_scheme = list(document["statusScheme"])
        metadata.content_hash = document["contentHash"]
        metadata.attributes = self._attributes.from_primitive(document["attributes"])
        metadata.dependencies = [Dependency(**d) for d in document["dependencies"]]
        metadata.artifacts = [Artifact(**a) for a in document["artifacts"]]
        # The factory may default this; the entry restores the recorded value.
        metadata.is_changing = False

        if isinstance(metadata, MutableIvyModuleMetadata):
            metadata.configurations = [
                Configuration(
                    name=c["name"],
                    extends_from=tuple(c["extendsFrom"]),
                    visible=c["visible"],
                    transitive=c["transitive"],
                )
                for c in document["configurations"]
            ]
            metadata.branch = document["branch"]
            metadata.extra_attributes = dict(document["extraAttributes"])
        elif isinstance(metadata, MutableMavenModuleMetadata):
            metadata.packaging = document["packaging"]
            metadata.snapshot_timestamp = document["snapshotTimestamp"]
            metadata.relocated = document["relocated"]
        return metadata


def _component_to_primitive(component_id: ModuleComponentIdentifier) -> dict[str, str]:
    return {
        "group": component_id.group,
        "module": component_id.module,
        "version": component_id.version,
    }


def _component_from_primitive(data: dict[str, str]) -> ModuleComponentIdentifier:
    return ModuleComponentIdentifier(data["group"], data["module"], data["version"])


def _dependency_to_primitive(dependency: Dependency) -> dict[str, Any]:
    return {
        "group": dependency.group,
        "module": dependency.module,
        "version": dependency.version,
        "configuration": dependency.configuration,
        "transitive": dependency.transitive,
        "optional": dependency.optional,
    }


def _artifact_to_primitive(artifact: Artifact) -> dict[str, Any]:
    return {
        "name": artifact.name,
        "type": artifact.type,
        "extension": artifact.extension,
        "classifier": artifact.classifier,
    }
