"""Settings loader.

Loads settings from a TOML configuration file, falling back to the default
configuration locations and finally to environment variables only.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import ValidationError

from modcache.config.models.settings import Settings
from modcache.shared.constants import ModuleCacheConfig
from modcache.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "modcache.toml"


def default_config_paths() -> list[Path]:
    """Configuration files tried, in order, when no path is given."""
    return [
        Path(CONFIG_FILE_NAME),
        Path.home() / ModuleCacheConfig.HOME_DIR / CONFIG_FILE_NAME,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            the default locations, then environment variables only.

    Returns:
        Settings instance loaded from the selected source

    Raises:
        ApplicationError: If the configuration file is missing or invalid
    """
    candidates = [Path(config_path)] if config_path else default_config_paths()
    for candidate in candidates:
        if config_path is None and not candidate.exists():
            continue
        try:
            settings = Settings.from_toml_file(candidate)
        except FileNotFoundError as e:
            raise ApplicationError(
                ErrorCode.CONFIG_ERROR,
                f"Configuration file not found: {candidate}",
                ErrorContext(file_path=str(candidate), operation="load_settings"),
                original_error=e,
            ) from e
        except (toml.TomlDecodeError, ValidationError) as e:
            raise ApplicationError(
                ErrorCode.CONFIG_INVALID,
                f"Invalid configuration in {candidate}: {e!s}",
                ErrorContext(file_path=str(candidate), operation="load_settings"),
                original_error=e,
            ) from e
        logger.debug("Loaded settings from %s", candidate)
        return settings

    try:
        return Settings()
    except ValidationError as e:
        raise ApplicationError(
            ErrorCode.CONFIG_INVALID,
            f"Invalid configuration in environment: {e!s}",
            ErrorContext(operation="load_settings"),
            original_error=e,
        ) from e
