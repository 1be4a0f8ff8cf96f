"""Roll per-package metrics up into DependencySetReports."""

from __future__ import annotations

from functools import reduce
from typing import Iterable

from ..graph.models import DependencyGraph, PackageId
from ..graph.queries import get_package
from .cache import MetricsCache
from .models import DependencySetReport, PackageMetrics


def collect_package_metrics(
    graph: DependencyGraph, cache: MetricsCache, pid: PackageId
) -> PackageMetrics:
    """Gather one package's line counts, build-script flag and unsafe report."""
    node = get_package(graph, pid)
    return PackageMetrics(
        id=pid,
        loc=cache.get_loc_report(node.source_dir),
        has_build_script=node.has_build_script,
        unsafe=cache.get_unsafe_report(pid),
    )


def sum_reports(reports: Iterable[DependencySetReport]) -> DependencySetReport:
    return reduce(lambda acc, r: acc + r, reports, DependencySetReport.zero())


def summarize_metrics(metrics: Iterable[PackageMetrics]) -> DependencySetReport:
    """Aggregate package metrics; a package id counts once however often it appears."""
    unique: dict[PackageId, PackageMetrics] = {}
    for m in metrics:
        unique.setdefault(m.id, m)
    return sum_reports(DependencySetReport.from_package(m) for m in unique.values())


def summarize_dependencies(
    graph: DependencyGraph, cache: MetricsCache, packages: Iterable[PackageId]
) -> DependencySetReport:
    """Aggregate report over ``packages`` (deduplicated by id)."""
    return summarize_metrics(
        collect_package_metrics(graph, cache, pid) for pid in sorted(set(packages))
    )
