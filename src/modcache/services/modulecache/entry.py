"""Index entry for a cached module version."""

from __future__ import annotations

from dataclasses import dataclass

from modcache.services.serialization.encoder import Decoder, Encoder
from modcache.services.serialization.serializers import Serializer
from modcache.shared.constants import SerializationConfig
from modcache.shared.errors import CacheSerializationError, ErrorContext
from modcache.shared.models.metadata import ModuleSource, MutableModuleMetadata


@dataclass(frozen=True)
class ModuleMetadataCacheEntry:
    """Small persisted record describing what a repository reported.

    Attributes:
        is_missing: The repository authoritatively reported no such module
        create_timestamp: Epoch milliseconds when the entry was recorded
        is_changing: The metadata was marked changing (e.g. a snapshot)
        external_resource: Source of the stored descriptor blob; None for
            missing entries
    """

    is_missing: bool
    create_timestamp: int
    is_changing: bool = False
    external_resource: ModuleSource | None = None

    def __post_init__(self) -> None:
        if self.is_missing and (self.is_changing or self.external_resource is not None):
            msg = "A missing-module entry cannot be changing or carry a source"
            raise ValueError(msg)

    @classmethod
    def for_missing(cls, now: int) -> ModuleMetadataCacheEntry:
        return cls(is_missing=True, create_timestamp=now)

    @classmethod
    def for_metadata(cls, metadata: MutableModuleMetadata, now: int) -> ModuleMetadataCacheEntry:
        return cls(
            is_missing=False,
            create_timestamp=now,
            is_changing=metadata.is_changing,
            external_resource=metadata.source,
        )

    def configure(self, metadata: MutableModuleMetadata) -> MutableModuleMetadata:
        """Stamp entry-level fields onto freshly loaded metadata.

        The blob does not store the changing flag or the module source;
        both come from the entry. Returns the same instance.
        """
        metadata.is_changing = self.is_changing
        metadata.source = self.external_resource
        return metadata


class ModuleMetadataCacheEntrySerializer(Serializer[ModuleMetadataCacheEntry]):
    """Type byte, timestamp, then changing flag and source for present entries."""

    def write(self, encoder: Encoder, value: ModuleMetadataCacheEntry) -> None:
        if value.is_missing:
            encoder.write_byte(SerializationConfig.ENTRY_TYPE_MISSING)
            encoder.write_long(value.create_timestamp)
            return

        encoder.write_byte(SerializationConfig.ENTRY_TYPE_PRESENT)
        encoder.write_long(value.create_timestamp)
        encoder.write_boolean(value.is_changing)
        source = value.external_resource
        encoder.write_boolean(source is not None)
        if source is not None:
            encoder.write_string(source.repository_id)
            encoder.write_nullable_string(source.descriptor_uri)
            encoder.write_nullable_string(source.sha1)

    def read(self, decoder: Decoder) -> ModuleMetadataCacheEntry:
        entry_type = decoder.read_byte()
        if entry_type == SerializationConfig.ENTRY_TYPE_MISSING:
            return ModuleMetadataCacheEntry.for_missing(decoder.read_long())
        if entry_type != SerializationConfig.ENTRY_TYPE_PRESENT:
            raise CacheSerializationError(
                f"Unknown cache entry type {entry_type}",
                ErrorContext(operation="read_cache_entry"),
            )

        create_timestamp = decoder.read_long()
        is_changing = decoder.read_boolean()
        source = None
        if decoder.read_boolean():
            source = ModuleSource(
                repository_id=decoder.read_string(),
                descriptor_uri=decoder.read_nullable_string(),
                sha1=decoder.read_nullable_string(),
            )
        return ModuleMetadataCacheEntry(
            is_missing=False,
            create_timestamp=create_timestamp,
            is_changing=is_changing,
            external_resource=source,
        )
