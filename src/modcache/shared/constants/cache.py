"""
Cache Configuration Constants

Names, file layout and format versions shared by the module metadata
cache, its persistent index and its descriptor file store.
"""

# Base time units
BASE_MILLISECOND = 1
BASE_SECOND = 1000 * BASE_MILLISECOND


class ModuleCacheConfig:
    """Module metadata cache layout."""

    # Persistent index name, also the database file stem
    INDEX_NAME = "module-metadata"
    INDEX_FILE_SUFFIX = ".db"

    # Directory layout beneath the artifact cache directory
    METADATA_DIR = "metadata-2.x"
    DESCRIPTORS_DIR = "descriptors"
    DESCRIPTOR_FILE_NAME = "descriptor.bin"

    # Cross-process lock file beneath the artifact cache directory
    LOCK_FILE_NAME = "modules.lock"
    DEFAULT_LOCK_TIMEOUT_SECONDS = 60.0

    # Default artifact cache directory beneath the user's home
    HOME_DIR = ".modcache"
    CACHES_DIR = "caches"
    ARTIFACT_CACHE_DIR = "modules-2"


class SerializationConfig:
    """Binary and blob format constants."""

    # Entry type tags
    ENTRY_TYPE_MISSING = 0
    ENTRY_TYPE_PRESENT = 1

    # Component identifier type tags
    COMPONENT_TYPE_MODULE = 1

    # Attribute value type tags
    ATTRIBUTE_TYPE_STRING = "string"
    ATTRIBUTE_TYPE_BOOLEAN = "boolean"
    ATTRIBUTE_TYPE_INTEGER = "integer"

    # Blob document
    BLOB_FORMAT_VERSION = 1
    FORMAT_IVY = "ivy"
    FORMAT_MAVEN = "maven"

    # Temporary file marker used during atomic writes
    TEMP_FILE_SUFFIX = ".tmp"


class MetadataDefaults:
    """Defaults applied by the metadata format factories."""

    STATUS_INTEGRATION = "integration"
    STATUS_MILESTONE = "milestone"
    STATUS_RELEASE = "release"
    DEFAULT_STATUS_SCHEME = (STATUS_INTEGRATION, STATUS_MILESTONE, STATUS_RELEASE)

    IVY_DEFAULT_CONFIGURATION = "default"
    MAVEN_DEFAULT_PACKAGING = "jar"
    MAVEN_SNAPSHOT_SUFFIX = "-SNAPSHOT"
