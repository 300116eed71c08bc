"""
CLI Constants

Command names, defaults and messages for the modcache command-line tool.
"""


class CLIDefaults:
    """Default values for CLI operations."""

    VERSION = "0.1.0"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1


class CLIMessages:
    """User-facing CLI messages."""

    NOT_CACHED = "Not cached: {component} in repository '{repository}'"
    NO_ENTRIES = "No entries recorded for repository '{repository}'"
    INVALID_COMPONENT = "Expected GROUP:MODULE:VERSION, got '{value}'"
