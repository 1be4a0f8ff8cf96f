"""Per-run metrics cache.

Holds two kinds of entries, both write-once for the lifetime of a run:

* line counts, keyed by canonical source directory and filled lazily on the
  first request (one count per directory, even under concurrent callers);
* unsafe-usage reports, keyed by (name, version) and filled in bulk by the
  scanner adapter. Lookups never trigger a scan.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, Protocol, Union

from ..exceptions import CacheConsistencyError
from ..graph.models import PackageId
from ..logging_config import get_logger
from .models import LocReport, UnsafeUsageReport
from .store import LocStore

logger = get_logger(__name__)

UnsafeKey = tuple[str, str]


class LineCountCollaborator(Protocol):
    def count(self, source_dir: Path) -> LocReport: ...


class MetricsCache:
    """Memoizes per-package metrics for one analysis run.

    Args:
        line_counter: Object whose ``count(source_dir)`` produces a LocReport.
        store: Optional persistent store consulted before counting.
    """

    def __init__(self, line_counter: LineCountCollaborator, store: Optional[LocStore] = None):
        self._line_counter = line_counter
        self._store = store
        self._loc: dict[str, LocReport] = {}
        self._unsafe: dict[UnsafeKey, UnsafeUsageReport] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}
        self.loc_scan_count = 0
        self.loc_hits = 0

    # ── Line counts ────────────────────────────────────────────────

    def get_loc_report(self, source_dir: Union[str, Path]) -> LocReport:
        """Line counts for ``source_dir``, counting at most once per run.

        Raises:
            LineCountError: Propagated from the line counter.
            CacheConsistencyError: If the entry vanished after being written.
        """
        key = str(Path(source_dir).resolve())

        with self._lock:
            cached = self._loc.get(key)
            if cached is not None:
                self.loc_hits += 1
                return cached
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # Another thread may have filled it while we waited
            with self._lock:
                cached = self._loc.get(key)
            if cached is not None:
                with self._lock:
                    self.loc_hits += 1
                return cached

            source = Path(key)
            if self._store is not None:
                report, counted = self._store.get_or_compute(
                    source, lambda: self._line_counter.count(source)
                )
            else:
                report, counted = self._line_counter.count(source), True
            if counted:
                with self._lock:
                    self.loc_scan_count += 1

            with self._lock:
                self._loc.setdefault(key, report)
                stored = self._loc.get(key)

        if stored is None:
            raise CacheConsistencyError(key)
        return stored

    # ── Unsafe reports ─────────────────────────────────────────────

    def record_unsafe_report(self, key: UnsafeKey, report: UnsafeUsageReport) -> bool:
        """Store a scanner result unless the key already has one.

        Returns:
            True if the entry was added, False if an earlier result was kept.
        """
        with self._lock:
            if key in self._unsafe:
                existing = self._unsafe[key]
            else:
                self._unsafe[key] = report
                existing = None
            stored = self._unsafe.get(key)

        if stored is None:
            raise CacheConsistencyError(key)
        if existing is not None:
            if existing != report:
                logger.debug("Divergent unsafe report for %s@%s; keeping first", *key)
            return False
        return True

    def get_unsafe_report(self, pid: PackageId) -> Optional[UnsafeUsageReport]:
        """Scanner result for ``pid``, or None if the scanner never reported it."""
        with self._lock:
            return self._unsafe.get(pid.key)

    def has_unsafe_report(self, pid: PackageId) -> bool:
        with self._lock:
            return pid.key in self._unsafe

    # ── Introspection ──────────────────────────────────────────────

    def stats(self) -> dict:
        with self._lock:
            return {
                "loc_entries": len(self._loc),
                "loc_scans": self.loc_scan_count,
                "loc_hits": self.loc_hits,
                "unsafe_entries": len(self._unsafe),
            }
