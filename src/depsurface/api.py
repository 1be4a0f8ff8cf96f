"""Public API for depsurface.

Example:
    >>> from depsurface import analyze
    >>>
    >>> reports = analyze("/path/to/cargo/project")
    >>> reports = analyze(
    ...     "/path/to/cargo/project",
    ...     only_direct=False,
    ...     scan_unsafe=False,
    ... )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .analysis import CodeAnalyzer
from .config import AnalysisConfig, load_config
from .graph.cargo_metadata import (
    graph_from_cargo_metadata,
    load_cargo_metadata_file,
    run_cargo_metadata,
)
from .graph.models import DependencyGraph
from .logging_config import get_logger
from .metrics.cache import LineCountCollaborator, MetricsCache
from .metrics.loc import LineCounter
from .metrics.models import CodeReport
from .metrics.store import LocStore, compute_config_hash
from .scanner.geiger import GeigerScanner, UnsafeScanner

logger = get_logger(__name__)


def load_graph(
    path: str | Path = ".",
    metadata_file: Optional[Path] = None,
    config: Optional[AnalysisConfig] = None,
) -> DependencyGraph:
    """Resolve the dependency graph of the Cargo project at ``path``.

    Reads ``metadata_file`` instead of running cargo when given.
    """
    config = config or AnalysisConfig()
    if metadata_file is not None:
        metadata = load_cargo_metadata_file(metadata_file)
        source = str(metadata_file)
    else:
        metadata = run_cargo_metadata(Path(path), timeout=config.metadata_timeout_seconds)
        source = str(path)
    return graph_from_cargo_metadata(
        metadata,
        include_dev_dependencies=config.include_dev_dependencies,
        source=source,
    )


def build_loc_store(config: AnalysisConfig) -> LocStore:
    return LocStore(
        cache_dir=config.cache_dir,
        ttl_hours=config.cache_ttl_hours,
        config_hash=compute_config_hash(config.fingerprint()),
        enabled=config.cache_enabled,
        excluded_dirs=tuple(config.excluded_dirs),
    )


def analyze_graph(
    graph: DependencyGraph,
    config: Optional[AnalysisConfig] = None,
    scanner: Optional[UnsafeScanner] = None,
    line_counter: Optional[LineCountCollaborator] = None,
    store: Optional[LocStore] = None,
) -> list[CodeReport]:
    """Produce code reports for an already-resolved graph.

    Args:
        graph: Dependency graph to analyze.
        config: Settings (defaults when omitted).
        scanner: Unsafe scanner; built from config when ``scan_unsafe`` is
            set and none is passed.
        line_counter: Line-count collaborator; built from config by default.
        store: Persistent LOC store; none by default.
    """
    config = config or AnalysisConfig()
    if line_counter is None:
        line_counter = LineCounter(
            primary_language=config.primary_language,
            excluded_dirs=config.excluded_dirs,
            count_hidden=config.count_hidden_files,
        )
    if scanner is None and config.scan_unsafe:
        scanner = GeigerScanner(
            command=config.scanner_command,
            timeout=config.scanner_timeout_seconds,
        )
    if not config.scan_unsafe:
        scanner = None

    cache = MetricsCache(line_counter, store=store)
    analyzer = CodeAnalyzer(graph, cache, scanner=scanner, workers=config.workers)
    return analyzer.analyze(only_direct=config.only_direct)


def analyze(
    path: str | Path = ".",
    config_file: Optional[Path] = None,
    metadata_file: Optional[Path] = None,
    **overrides: Any,
) -> list[CodeReport]:
    """Analyze the dependencies of a Cargo project.

    Pipeline:
    1. Load configuration (auto-discover TOML + apply overrides)
    2. Resolve the dependency graph via cargo metadata
    3. Scan workspace members for unsafe code
    4. Build one CodeReport per dependency

    Args:
        path: Cargo project root (default: current directory)
        config_file: Optional explicit config file path
        metadata_file: Saved ``cargo metadata`` JSON to use instead of cargo
        **overrides: Configuration overrides (e.g., only_direct=False)

    Raises:
        DepSurfaceError: On configuration, graph, scanner or counting failure
    """
    config = load_config(config_file=config_file, **overrides)
    graph = load_graph(path, metadata_file=metadata_file, config=config)
    with build_loc_store(config) as store:
        return analyze_graph(graph, config=config, store=store)
