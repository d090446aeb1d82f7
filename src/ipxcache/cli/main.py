"""
CLI for administering the IPX cache.

Commands:
    ipxcache config - Show current configuration
    ipxcache get PATH - Show a cached entry's metadata
    ipxcache delete PATH - Remove a cached entry
    ipxcache clear - Wipe every cached entry
    ipxcache version - Print version
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ipxcache import __version__
from ipxcache.cache.engine import IPXCache
from ipxcache.cache.freshness import expires_at
from ipxcache.config import Settings, clear_settings_cache, get_settings
from ipxcache.exceptions import IPXCacheError
from ipxcache.logging import setup_logging

app = typer.Typer(
    name="ipxcache",
    help="IPX cache - persistent cache for derived image artifacts",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _load_settings() -> Settings:
    """Load settings or exit with an error message."""
    try:
        clear_settings_cache()
        settings = get_settings()
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] Configuration is invalid.\n{e}")
        raise typer.Exit(1) from None

    setup_logging(settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    return settings


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _load_settings()

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command()
def get(
    path: Annotated[str, typer.Argument(help="Cache path (e.g. /img/a.png)")],
) -> None:
    """Show metadata of a cached entry. Expired entries are purged."""
    settings = _load_settings()

    async def _get() -> None:
        async with IPXCache.from_settings(settings) as cache:
            entry = await cache.get(path)

        if entry is None:
            console.print(f"[yellow]miss[/yellow] {path}")
            raise typer.Exit(1)

        table = Table(title=path, show_header=True)
        table.add_column("Header", style="cyan")
        table.add_column("Value", style="green")
        for name, value in entry.meta.items():
            table.add_row(name, str(value))
        console.print(table)
        console.print(f"[bold]Size:[/bold] {entry.data.nbytes} bytes")
        console.print(
            f"[bold]Fresh until:[/bold] "
            f"{expires_at(entry.meta, settings.DEFAULT_TTL).isoformat()}"
        )

    try:
        asyncio.run(_get())
    except IPXCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from None


@app.command()
def delete(
    path: Annotated[str, typer.Argument(help="Cache path to remove")],
) -> None:
    """Remove a cached entry (no error if it does not exist)."""
    settings = _load_settings()

    async def _delete() -> None:
        async with IPXCache.from_settings(settings) as cache:
            await cache.delete(path)

    asyncio.run(_delete())
    console.print(f"Deleted {path}")


@app.command()
def clear(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Wipe every cached entry."""
    settings = _load_settings()

    if not yes:
        typer.confirm(f"Clear all entries under {settings.CACHE_DIR}?", abort=True)

    async def _clear() -> None:
        async with IPXCache.from_settings(settings) as cache:
            cache.clear()

    asyncio.run(_clear())
    console.print("Cache cleared")


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"ipx-cache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
