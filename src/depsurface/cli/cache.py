"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..api import build_loc_store
from ..exceptions import DepSurfaceError
from . import app
from ._common import console, resolve_config


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
):
    """Show line-count cache information."""
    try:
        settings = resolve_config(config=config)
    except DepSurfaceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    with build_loc_store(settings) as store:
        stats = store.stats()

    console.print("[bold cyan]depsurface Cache Info[/bold cyan]")
    console.print()

    if stats.get("enabled"):
        console.print("Status: [green]Enabled[/green]")
        console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
        console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
        console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
    else:
        console.print("Status: [red]Disabled[/red]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
):
    """Clear the line-count cache."""
    try:
        settings = resolve_config(config=config)
    except DepSurfaceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    with build_loc_store(settings) as store:
        store.clear()
    console.print("[green]Cache cleared successfully[/green]")
