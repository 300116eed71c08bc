"""Domain models for module identity and module metadata."""

from modcache.shared.models.attributes import (
    EMPTY_ATTRIBUTES,
    AttributeContainer,
    AttributeValue,
)
from modcache.shared.models.identifiers import (
    ImmutableModuleIdentifierFactory,
    ModuleComponentIdentifier,
    ModuleIdentifier,
)
from modcache.shared.models.metadata import (
    Artifact,
    Configuration,
    Dependency,
    IvyMutableModuleMetadataFactory,
    MavenMutableModuleMetadataFactory,
    ModuleSource,
    MutableIvyModuleMetadata,
    MutableMavenModuleMetadata,
    MutableModuleMetadata,
)

__all__ = [
    "EMPTY_ATTRIBUTES",
    "Artifact",
    "AttributeContainer",
    "AttributeValue",
    "Configuration",
    "Dependency",
    "ImmutableModuleIdentifierFactory",
    "IvyMutableModuleMetadataFactory",
    "MavenMutableModuleMetadataFactory",
    "ModuleComponentIdentifier",
    "ModuleIdentifier",
    "ModuleSource",
    "MutableIvyModuleMetadata",
    "MutableMavenModuleMetadata",
    "MutableModuleMetadata",
]
