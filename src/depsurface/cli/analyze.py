"""Main analysis command."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..api import analyze_graph, build_loc_store, load_graph
from ..exceptions import DepSurfaceError
from ..formatters import JsonFormatter
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the Cargo project",
        exists=False, file_okay=False, dir_okay=True,
    ),
    metadata: Optional[Path] = typer.Option(
        None, "--metadata", "-m",
        help="Saved `cargo metadata --format-version 1` output to use instead of running cargo",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
    all_dependencies: bool = typer.Option(
        False, "--all",
        help="Report on every dependency, not only direct ones",
    ),
    no_unsafe: bool = typer.Option(
        False, "--no-unsafe",
        help="Skip the cargo-geiger unsafe scan",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Write the JSON report to a file instead of stdout",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w",
        help="Threads used to assemble reports",
        min=1,
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache",
        help="Do not read or write the persistent line-count cache",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only log errors",
    ),
):
    """Report code size and unsafe usage for each dependency as JSON."""
    try:
        settings = resolve_config(
            config=config,
            all_dependencies=all_dependencies,
            no_unsafe=no_unsafe,
            no_cache=no_cache,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
    except DepSurfaceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        raise typer.Exit(1)

    logger = setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
    )

    try:
        graph = load_graph(path, metadata_file=metadata, config=settings)
        with build_loc_store(settings) as store:
            reports = analyze_graph(graph, config=settings, store=store)

    except DepSurfaceError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    formatter = JsonFormatter()
    if output is not None:
        output.write_text(formatter.format(reports) + "\n", encoding="utf-8")
        if settings.verbosity != "quiet":
            console.print(f"[green]Wrote {len(reports)} reports to {output}[/green]")
    else:
        formatter.render(reports)
