"""Cache key: a module version as seen through one repository."""

from __future__ import annotations

from dataclasses import dataclass

from modcache.services.serialization.encoder import Decoder, Encoder
from modcache.services.serialization.serializers import (
    ComponentIdentifierSerializer,
    Serializer,
)
from modcache.shared.errors import ErrorContext, InvalidCacheKeyError
from modcache.shared.models.identifiers import ModuleComponentIdentifier


@dataclass(frozen=True)
class ModuleComponentAtRepositoryKey:
    """``(repository_id, component_id)`` pair identifying one cache entry.

    The repository id is opaque to the cache; two repositories pointing at
    the same server still have distinct ids and distinct entries.
    """

    repository_id: str
    component_id: ModuleComponentIdentifier

    def __post_init__(self) -> None:
        if not isinstance(self.repository_id, str) or not self.repository_id:
            raise InvalidCacheKeyError(
                "Repository id must be a non-empty string",
                ErrorContext(operation="create_key"),
            )
        if not isinstance(self.component_id, ModuleComponentIdentifier):
            raise InvalidCacheKeyError(
                f"Component id must be a ModuleComponentIdentifier, "
                f"got {type(self.component_id).__name__}",
                ErrorContext(
                    operation="create_key",
                    additional_data={"repository_id": self.repository_id},
                ),
            )

    def __str__(self) -> str:
        return f"{self.component_id.display_name}@{self.repository_id}"


class RevisionKeySerializer(Serializer[ModuleComponentAtRepositoryKey]):
    """Writes the repository id first, then the component identifier.

    Keys of one repository therefore share an encoded prefix, see
    :meth:`repository_prefix`.
    """

    def __init__(self) -> None:
        self.component_id_serializer = ComponentIdentifierSerializer()

    def write(self, encoder: Encoder, value: ModuleComponentAtRepositoryKey) -> None:
        encoder.write_string(value.repository_id)
        self.component_id_serializer.write(encoder, value.component_id)

    def read(self, decoder: Decoder) -> ModuleComponentAtRepositoryKey:
        repository_id = decoder.read_string()
        component_id = self.component_id_serializer.read(decoder)
        return ModuleComponentAtRepositoryKey(repository_id, component_id)

    def repository_prefix(self, repository_id: str) -> bytes:
        encoder = Encoder()
        encoder.write_string(repository_id)
        return encoder.to_bytes()

    def signature(self) -> str:
        return f"{super().signature()}({self.component_id_serializer.signature()})"

    def __eq__(self, other: object) -> bool:
        return (
            super().__eq__(other)
            and isinstance(other, RevisionKeySerializer)
            and self.component_id_serializer == other.component_id_serializer
        )

    def __hash__(self) -> int:
        return hash((super().__hash__(), self.component_id_serializer))
