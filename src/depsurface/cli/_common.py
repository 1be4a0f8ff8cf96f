"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

# Status output goes to stderr; stdout carries the JSON report
console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    all_dependencies: bool = False,
    no_unsafe: bool = False,
    no_cache: bool = False,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options.

    Flags that were not given leave file and environment settings alone.
    """
    overrides = {}
    if all_dependencies:
        overrides["only_direct"] = False
    if no_unsafe:
        overrides["scan_unsafe"] = False
    if no_cache:
        overrides["cache_enabled"] = False
    if workers is not None:
        overrides["workers"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
