"""modcache configuration."""

from modcache.config.loader import load_settings
from modcache.config.models import CacheSettings, LoggingSettings, Settings

__all__ = ["CacheSettings", "LoggingSettings", "Settings", "load_settings"]
