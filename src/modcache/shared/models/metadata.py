"""Module metadata models.

The parsed, mutable description of one module version as reported by a
repository: dependencies, artifacts, attributes, status and the
format-specific details of Ivy and Maven descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from modcache.shared.constants import MetadataDefaults, SerializationConfig
from modcache.shared.models.attributes import EMPTY_ATTRIBUTES, AttributeContainer
from modcache.shared.models.identifiers import ModuleComponentIdentifier


@dataclass(frozen=True)
class ModuleSource:
    """Where the metadata of a module version was obtained from.

    Attributes:
        repository_id: Opaque id of the repository that served the descriptor
        descriptor_uri: Location of the descriptor on that repository
        sha1: Checksum of the descriptor content, when known
    """

    repository_id: str
    descriptor_uri: str | None = None
    sha1: str | None = None


@dataclass(frozen=True)
class Dependency:
    """A declared dependency on another module version."""

    group: str
    module: str
    version: str
    configuration: str | None = None
    transitive: bool = True
    optional: bool = False

    @property
    def selector(self) -> ModuleComponentIdentifier:
        return ModuleComponentIdentifier(self.group, self.module, self.version)


@dataclass(frozen=True)
class Artifact:
    """A file published by a module version."""

    name: str
    type: str = "jar"
    extension: str = "jar"
    classifier: str | None = None


@dataclass(frozen=True)
class Configuration:
    """An Ivy configuration: a named group of artifacts and dependencies."""

    name: str
    extends_from: tuple[str, ...] = ()
    visible: bool = True
    transitive: bool = True


@dataclass(eq=True)
class MutableModuleMetadata:
    """Metadata shared by every descriptor format.

    ``is_changing`` and ``source`` are recorded on the cache entry rather
    than in the stored blob, and are restored when the entry is loaded.
    """

    FORMAT: ClassVar[str] = ""

    component_id: ModuleComponentIdentifier
    status: str = MetadataDefaults.STATUS_INTEGRATION
    status_scheme: list[str] = field(
        default_factory=lambda: list(MetadataDefaults.DEFAULT_STATUS_SCHEME)
    )
    is_changing: bool = False
    source: ModuleSource | None = None
    content_hash: str | None = None
    attributes: AttributeContainer = EMPTY_ATTRIBUTES
    dependencies: list[Dependency] = field(default_factory=list)
    artifacts: list[Artifact] = field(default_factory=list)

    @property
    def format(self) -> str:
        return self.FORMAT


@dataclass(eq=True)
class MutableIvyModuleMetadata(MutableModuleMetadata):
    """Metadata parsed from an Ivy descriptor."""

    FORMAT: ClassVar[str] = SerializationConfig.FORMAT_IVY

    configurations: list[Configuration] = field(default_factory=list)
    branch: str | None = None
    extra_attributes: dict[str, str] = field(default_factory=dict)


@dataclass(eq=True)
class MutableMavenModuleMetadata(MutableModuleMetadata):
    """Metadata parsed from a Maven POM."""

    FORMAT: ClassVar[str] = SerializationConfig.FORMAT_MAVEN

    packaging: str = MetadataDefaults.MAVEN_DEFAULT_PACKAGING
    snapshot_timestamp: str | None = None
    relocated: bool = False


class IvyMutableModuleMetadataFactory:
    """Creates Ivy metadata with Ivy defaults."""

    format = SerializationConfig.FORMAT_IVY

    def create(
        self,
        component_id: ModuleComponentIdentifier,
        dependencies: list[Dependency] | None = None,
    ) -> MutableIvyModuleMetadata:
        return MutableIvyModuleMetadata(
            component_id=component_id,
            dependencies=list(dependencies or []),
            configurations=[Configuration(MetadataDefaults.IVY_DEFAULT_CONFIGURATION)],
        )


class MavenMutableModuleMetadataFactory:
    """Creates Maven metadata; ``-SNAPSHOT`` versions are changing."""

    format = SerializationConfig.FORMAT_MAVEN

    def create(
        self,
        component_id: ModuleComponentIdentifier,
        dependencies: list[Dependency] | None = None,
    ) -> MutableMavenModuleMetadata:
        snapshot = component_id.version.endswith(MetadataDefaults.MAVEN_SNAPSHOT_SUFFIX)
        return MutableMavenModuleMetadata(
            component_id=component_id,
            dependencies=list(dependencies or []),
            status=(
                MetadataDefaults.STATUS_INTEGRATION
                if snapshot
                else MetadataDefaults.STATUS_RELEASE
            ),
            is_changing=snapshot,
        )
