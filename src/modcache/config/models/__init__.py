"""Configuration models."""

from modcache.config.models.app_settings import LoggingSettings
from modcache.config.models.cache_settings import CacheSettings
from modcache.config.models.settings import Settings

__all__ = ["CacheSettings", "LoggingSettings", "Settings"]
