"""Binary and blob serialization for the module metadata cache."""

from modcache.services.serialization.encoder import Decoder, Encoder
from modcache.services.serialization.metadata_serializer import ModuleMetadataSerializer
from modcache.services.serialization.serializers import (
    AttributeContainerSerializer,
    ComponentIdentifierSerializer,
    Serializer,
)

__all__ = [
    "AttributeContainerSerializer",
    "ComponentIdentifierSerializer",
    "Decoder",
    "Encoder",
    "ModuleMetadataSerializer",
    "Serializer",
]
