"""Per-package metrics: value types, line counting, caching and aggregation."""

from .aggregate import collect_package_metrics, sum_reports, summarize_dependencies, summarize_metrics
from .cache import MetricsCache
from .loc import LANGUAGES, LineCounter, count_code_lines
from .models import (
    CodeReport,
    DependencySetReport,
    LocReport,
    PackageMetrics,
    UnsafeDetails,
    UnsafeUsageReport,
)
from .store import LocStore, compute_config_hash

__all__ = [
    "LocReport",
    "UnsafeDetails",
    "UnsafeUsageReport",
    "PackageMetrics",
    "DependencySetReport",
    "CodeReport",
    "LANGUAGES",
    "LineCounter",
    "count_code_lines",
    "LocStore",
    "compute_config_hash",
    "MetricsCache",
    "collect_package_metrics",
    "sum_reports",
    "summarize_metrics",
    "summarize_dependencies",
]
