"""
modcache Typer CLI Application

Inspect the module metadata cache from the command line: what a repository
reported about one module version, and which versions are recorded for a
repository.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from dependency_injector import providers

from modcache.cli.cache_handler import entries_command, lookup_command
from modcache.cli.json_formatter import format_json_output
from modcache.config import Settings, load_settings
from modcache.containers import Container
from modcache.services.modulecache import DefaultModuleMetadataCache
from modcache.shared.constants import CLIDefaults, CLIMessages
from modcache.shared.errors import ModCacheError
from modcache.shared.logging import log_operation_error, setup_structured_logger
from modcache.shared.models import ModuleComponentIdentifier

logger = logging.getLogger(__name__)

__version__ = CLIDefaults.VERSION


class LogLevel(str, Enum):
    """Log levels accepted on the command line."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


config_option = typer.Option(
    "--config",
    "-c",
    help="Path to a modcache.toml configuration file.",
    dir_okay=False,
)
cache_dir_option = typer.Option(
    "--cache-dir",
    help="Artifact cache directory (overrides the configured one).",
    file_okay=False,
)
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
)
json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"modcache {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="modcache",
    help="Inspect the module metadata cache.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version information and exit.",
            is_eager=True,
            callback=version_callback,
        ),
    ] = False,
) -> None:
    """Inspect the module metadata cache."""


def _load_cli_settings(
    config_path: Path | None,
    cache_dir: Path | None,
    log_level: LogLevel | None,
) -> Settings:
    settings = load_settings(config_path)
    if cache_dir is not None:
        settings.cache.cache_dir = cache_dir
    level = log_level.value if log_level else settings.logging.level
    setup_structured_logger(
        "modcache",
        level,
        settings.logging.file,
        use_rich_console=settings.logging.rich_console,
    )
    return settings


@contextmanager
def _metadata_cache(settings: Settings) -> Iterator[DefaultModuleMetadataCache]:
    container = Container()
    container.config.override(providers.Object(settings))
    try:
        yield container.module_metadata_cache()
    finally:
        container.cache_locking_manager().close()


def _run(
    command: str,
    json_output: bool,
    config_path: Path | None,
    cache_dir: Path | None,
    log_level: LogLevel | None,
    handler: Callable[[DefaultModuleMetadataCache], int],
) -> None:
    try:
        settings = _load_cli_settings(config_path, cache_dir, log_level)
        with _metadata_cache(settings) as cache:
            exit_code = handler(cache)
    except ModCacheError as e:
        log_operation_error(logger, e, operation=command)
        if json_output:
            typer.echo(format_json_output(False, command, None, [e.message]).decode())
        else:
            typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(CLIDefaults.EXIT_ERROR) from e
    raise typer.Exit(exit_code)


def _parse_component(value: str) -> ModuleComponentIdentifier:
    try:
        return ModuleComponentIdentifier.parse(value)
    except ModCacheError as e:
        raise typer.BadParameter(CLIMessages.INVALID_COMPONENT.format(value=value)) from e


@app.command("lookup")
def lookup_command_typer(
    repository: Annotated[str, typer.Argument(help="Repository id the module was resolved from.")],
    component: Annotated[
        str,
        typer.Argument(help="Module version as GROUP:MODULE:VERSION."),
    ],
    config_path: Annotated[Optional[Path], config_option] = None,
    cache_dir: Annotated[Optional[Path], cache_dir_option] = None,
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    Show what REPOSITORY reported about one module version.

    Exits with status 1 when nothing is cached for the module version.

    Examples:
        modcache lookup central org.example:lib:1.0
        modcache lookup central org.example:lib:1.0 --json
    """
    component_id = _parse_component(component)
    _run(
        "lookup",
        json_output,
        config_path,
        cache_dir,
        log_level,
        lambda cache: lookup_command(cache, repository, component_id, json_output=json_output),
    )


@app.command("entries")
def entries_command_typer(
    repository: Annotated[str, typer.Argument(help="Repository id to list entries for.")],
    config_path: Annotated[Optional[Path], config_option] = None,
    cache_dir: Annotated[Optional[Path], cache_dir_option] = None,
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    List the module versions recorded for REPOSITORY.

    Examples:
        modcache entries central
        modcache entries central --json
    """
    _run(
        "entries",
        json_output,
        config_path,
        cache_dir,
        log_level,
        lambda cache: entries_command(cache, repository, json_output=json_output),
    )


if __name__ == "__main__":
    app()
