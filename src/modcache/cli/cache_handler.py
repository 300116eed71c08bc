"""Cache command handlers.

Render what the module metadata cache holds for one module version or for
one repository, as a Rich table or as JSON.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from modcache.cli.json_formatter import format_json_output
from modcache.services.modulecache import (
    CachedMetadata,
    DefaultModuleMetadataCache,
    ModuleComponentAtRepositoryKey,
    ModuleMetadataCacheEntry,
)
from modcache.shared.constants import CLIDefaults, CLIMessages
from modcache.shared.models import ModuleComponentIdentifier

logger = logging.getLogger(__name__)
console = Console()


@dataclass(frozen=True)
class RepositoryRef:
    """Repository known only by the id given on the command line."""

    id: str


def lookup_command(
    cache: DefaultModuleMetadataCache,
    repository_id: str,
    component: ModuleComponentIdentifier,
    *,
    json_output: bool = False,
) -> int:
    """Show the cached view for one module version.

    Returns:
        Exit code: success when cached, error when not cached
    """
    cached = cache.lookup(RepositoryRef(repository_id), component)
    if cached is None:
        message = CLIMessages.NOT_CACHED.format(
            component=component.display_name,
            repository=repository_id,
        )
        if json_output:
            typer.echo(format_json_output(False, "lookup", None, [message]).decode())
        else:
            console.print(f"[yellow]{message}[/yellow]")
        return CLIDefaults.EXIT_ERROR

    data = _cached_metadata_to_dict(component, cached)
    if json_output:
        typer.echo(format_json_output(True, "lookup", data).decode())
        return CLIDefaults.EXIT_SUCCESS

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Component", data["component"])
    table.add_row("Repository", repository_id)
    table.add_row("Missing", str(data["missing"]))
    table.add_row("Changing", str(data["changing"]))
    table.add_row("Age (ms)", str(data["age_millis"]))
    if not cached.is_missing:
        table.add_row("Status", data["status"])
        table.add_row("Format", data["format"])
        table.add_row("Dependencies", "\n".join(data["dependencies"]) or "-")
    console.print(table)
    return CLIDefaults.EXIT_SUCCESS


def entries_command(
    cache: DefaultModuleMetadataCache,
    repository_id: str,
    *,
    json_output: bool = False,
) -> int:
    """List the index entries recorded for one repository."""
    entries = cache.entries_for_repository(repository_id)
    rows = [_entry_to_dict(key, entry) for key, entry in entries]

    if json_output:
        typer.echo(format_json_output(True, "entries", {"entries": rows}).decode())
        return CLIDefaults.EXIT_SUCCESS

    if not rows:
        console.print(f"[yellow]{CLIMessages.NO_ENTRIES.format(repository=repository_id)}[/yellow]")
        return CLIDefaults.EXIT_SUCCESS

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan")
    table.add_column("Missing")
    table.add_column("Changing")
    table.add_column("Recorded (epoch ms)")
    for row in rows:
        table.add_row(
            row["component"],
            str(row["missing"]),
            str(row["changing"]),
            str(row["created_at"]),
        )
    console.print(table)
    return CLIDefaults.EXIT_SUCCESS


def _cached_metadata_to_dict(
    component: ModuleComponentIdentifier, cached: CachedMetadata
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "component": component.display_name,
        "missing": cached.is_missing,
        "changing": cached.is_changing,
        "age_millis": cached.age_millis,
    }
    metadata = cached.metadata
    if metadata is not None:
        data["status"] = metadata.status
        data["format"] = metadata.format
        data["dependencies"] = [d.selector.display_name for d in metadata.dependencies]
    return data


def _entry_to_dict(key: ModuleComponentAtRepositoryKey, entry: ModuleMetadataCacheEntry) -> dict[str, Any]:
    return {
        "component": key.component_id.display_name,
        "missing": entry.is_missing,
        "changing": entry.is_changing,
        "created_at": entry.create_timestamp,
    }
