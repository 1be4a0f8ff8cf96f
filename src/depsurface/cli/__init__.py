"""CLI entry point. Importing the subcommand modules registers them on ``app``."""

from typing import Optional

import typer

from .. import __version__

app = typer.Typer(
    name="depsurface",
    help="depsurface - code size and unsafe usage attributed across Cargo dependencies",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"depsurface {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Measure the code surface each dependency pulls into a build."""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .cache import cache_clear as _cache_clear, cache_info as _cache_info  # noqa: F401, E402
