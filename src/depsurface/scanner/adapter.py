"""Populate the metrics cache from the unsafe scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..logging_config import get_logger
from ..metrics.cache import MetricsCache
from .geiger import UnsafeScanner

logger = get_logger(__name__)


@dataclass
class ScanSummary:
    """What one warm-up pass did."""

    manifests_scanned: int = 0
    records_seen: int = 0
    records_added: int = 0
    unscanned_files: list[str] = field(default_factory=list)


def warm_unsafe_cache(
    cache: MetricsCache,
    scanner: UnsafeScanner,
    manifest_paths: Iterable[Path],
) -> ScanSummary:
    """Scan each manifest once and merge the results into ``cache``.

    The first result for a (name, version) wins; later invocations that
    report the same package differently are ignored. Any ScannerFailure
    propagates and ends the run.
    """
    summary = ScanSummary()
    seen_manifests: set[Path] = set()

    for manifest in sorted(Path(p) for p in manifest_paths):
        if manifest in seen_manifests:
            continue
        seen_manifests.add(manifest)

        output = scanner.scan(manifest)
        summary.manifests_scanned += 1
        for record in output.records:
            summary.records_seen += 1
            if cache.record_unsafe_report(record.key, record.report):
                summary.records_added += 1
        summary.unscanned_files.extend(output.unscanned_files)

    if summary.unscanned_files:
        logger.warning(
            "%d files used in the build were not scanned for unsafe code",
            len(summary.unscanned_files),
        )
    logger.debug(
        "Unsafe scan: %d manifests, %d records, %d cached",
        summary.manifests_scanned,
        summary.records_seen,
        summary.records_added,
    )
    return summary
