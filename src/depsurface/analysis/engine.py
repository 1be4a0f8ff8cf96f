"""Report assembly: one CodeReport per analyzed dependency."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..exceptions import DepSurfaceError, ReportAssemblyError
from ..graph.models import DependencyGraph, PackageId
from ..graph.ownership import exclusive_dependencies
from ..graph.queries import (
    all_dependencies,
    get_package,
    transitive_dependencies,
    workspace_direct_dependencies,
)
from ..logging_config import get_logger
from ..metrics.aggregate import summarize_dependencies
from ..metrics.cache import MetricsCache
from ..metrics.models import CodeReport
from ..scanner.adapter import ScanSummary, warm_unsafe_cache
from ..scanner.geiger import UnsafeScanner

logger = get_logger(__name__)


class CodeAnalyzer:
    """Builds code-surface reports for the dependencies of a workspace.

    Args:
        graph: Resolved dependency graph.
        cache: Metrics cache shared by every report in the run.
        scanner: Unsafe scanner run once per workspace member. Without one,
            every unsafe report is absent.
        workers: Threads used to assemble reports (1 = sequential).
    """

    def __init__(
        self,
        graph: DependencyGraph,
        cache: MetricsCache,
        scanner: Optional[UnsafeScanner] = None,
        workers: int = 1,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.graph = graph
        self.cache = cache
        self.scanner = scanner
        self.workers = workers
        self.scan_summary: Optional[ScanSummary] = None

    def analyze(self, only_direct: bool = True) -> list[CodeReport]:
        """Run the full pipeline.

        Args:
            only_direct: Report on direct dependencies of the workspace only;
                False reports on every external dependency.

        Returns:
            Reports sorted by package id.

        Raises:
            ScannerFailure: If the unsafe scanner fails.
            ReportAssemblyError: If any single report cannot be built.
        """
        if self.scanner is not None:
            self.scan_summary = self.warm_unsafe_cache()

        direct = workspace_direct_dependencies(self.graph)
        targets = sorted(direct if only_direct else all_dependencies(self.graph))
        logger.info("Assembling reports for %d dependencies", len(targets))

        if self.workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() re-raises the first failure in target order
                reports = list(
                    executor.map(lambda pid: self.build_report(pid, pid in direct), targets)
                )
        else:
            reports = [self.build_report(pid, pid in direct) for pid in targets]

        logger.debug("Cache after run: %s", self.cache.stats())
        return reports

    def warm_unsafe_cache(self) -> ScanSummary:
        if self.scanner is None:
            raise ValueError("no scanner configured")
        manifests = [
            get_package(self.graph, member).manifest_path
            for member in sorted(self.graph.workspace_members)
        ]
        return warm_unsafe_cache(self.cache, self.scanner, manifests)

    def build_report(self, pid: PackageId, is_direct: bool = True) -> CodeReport:
        """Assemble the report for one package.

        Raises:
            ReportAssemblyError: Naming the package and the step that failed.
        """
        step = "look up package"
        try:
            node = get_package(self.graph, pid)

            step = "count lines"
            loc = self.cache.get_loc_report(node.source_dir)
            unsafe = self.cache.get_unsafe_report(pid)

            step = "resolve transitive dependencies"
            dependencies = transitive_dependencies(self.graph, pid)

            step = "partition exclusive dependencies"
            exclusive = exclusive_dependencies(self.graph, pid, dependencies)

            step = "aggregate dependency metrics"
            dep_report = summarize_dependencies(self.graph, self.cache, dependencies)
            exclusive_report = summarize_dependencies(self.graph, self.cache, exclusive)
        except ReportAssemblyError:
            raise
        except DepSurfaceError as e:
            raise ReportAssemblyError(pid, step, str(e)) from e

        if unsafe is None:
            logger.debug("No unsafe report for %s", pid)

        return CodeReport(
            id=pid,
            is_direct=is_direct,
            has_build_script=node.has_build_script,
            loc=loc,
            unsafe=unsafe,
            dependencies=dep_report,
            exclusive_dependencies=exclusive_report,
        )
