"""
Persistent line-count store.

Uses diskcache for SQLite-based storage so repeated runs over the same
registry sources skip re-counting.
"""

import hashlib
import json
import os
from pathlib import Path
from typing import Callable, Optional

from diskcache import Cache

from ..logging_config import get_logger
from .models import LocReport

logger = get_logger(__name__)


class LocStore:
    """
    Disk-backed LocReport store keyed by directory fingerprint.

    A fingerprint covers the directory path, file count, newest mtime and
    total size of the tree plus the line-counting settings, so any edit or
    settings change produces a new key.
    """

    def __init__(
        self,
        cache_dir: str = ".depsurface-cache",
        ttl_hours: int = 168,
        config_hash: str = "",
        enabled: bool = True,
        excluded_dirs: tuple[str, ...] = ("target",),
    ):
        """
        Initialize store.

        Args:
            cache_dir: Directory for cache storage
            ttl_hours: Time-to-live in hours (0 = never expire)
            config_hash: Hash of line-counting settings
            enabled: Whether the store is active
            excluded_dirs: Directory names skipped when fingerprinting
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600 or None
        self.config_hash = config_hash
        self.excluded_dirs = frozenset(excluded_dirs)

        if self.enabled:
            self.cache: Optional[Cache] = Cache(cache_dir)
            logger.debug(f"LOC store initialized at {cache_dir} with TTL={ttl_hours}h")
        else:
            self.cache = None
            logger.debug("LOC store disabled")

    def fingerprint(self, source_dir: Path) -> str:
        """Cache key for a source tree's current state."""
        count = 0
        newest = 0.0
        size = 0
        for dirpath, dirnames, filenames in os.walk(source_dir):
            dirnames[:] = [d for d in dirnames if d not in self.excluded_dirs]
            for name in filenames:
                try:
                    stat = os.stat(os.path.join(dirpath, name))
                except OSError:
                    continue
                count += 1
                newest = max(newest, stat.st_mtime)
                size += stat.st_size
        key_data = f"{source_dir}:{count}:{newest}:{size}:{self.config_hash}"
        return hashlib.sha256(key_data.encode()).hexdigest()

    def get(self, source_dir: Path) -> Optional[LocReport]:
        """Stored report for ``source_dir`` or None."""
        if not self.enabled or self.cache is None:
            return None
        return self._load(self.fingerprint(source_dir), source_dir)

    def set(self, source_dir: Path, report: LocReport) -> None:
        if not self.enabled or self.cache is None:
            return
        self._save(self.fingerprint(source_dir), report)

    def get_or_compute(
        self, source_dir: Path, compute: Callable[[], LocReport]
    ) -> tuple[LocReport, bool]:
        """
        Stored report for ``source_dir``, or ``compute()`` stored on a miss.

        The tree is fingerprinted once, before ``compute`` runs.

        Returns:
            (report, computed) where computed is False on a store hit
        """
        if not self.enabled or self.cache is None:
            return compute(), True

        key = self.fingerprint(source_dir)
        report = self._load(key, source_dir)
        if report is not None:
            return report, False

        report = compute()
        self._save(key, report)
        return report, True

    def _load(self, key: str, source_dir: Path) -> Optional[LocReport]:
        value = self.cache.get(key)
        if value is None:
            return None
        logger.debug(f"LOC store hit: {source_dir}")
        return LocReport(**value)

    def _save(self, key: str, report: LocReport) -> None:
        self.cache.set(key, report.to_dict(), expire=self.ttl_seconds)

    def clear(self) -> None:
        """Clear all stored entries."""
        if not self.enabled or self.cache is None:
            return

        self.cache.clear()
        logger.info("LOC store cleared")

    def stats(self) -> dict:
        """
        Get store statistics.

        Returns:
            Dictionary with store stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        return {
            "enabled": True,
            "size": len(self.cache),
            "directory": self.cache.directory,
            "volume": self.cache.volume(),
        }

    def close(self) -> None:
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "LocStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def compute_config_hash(config: dict) -> str:
    """
    Compute hash of configuration for cache invalidation.

    Args:
        config: Configuration dictionary

    Returns:
        Truncated SHA256 hash of configuration
    """
    config_str = json.dumps(config, sort_keys=True)
    return hashlib.sha256(config_str.encode()).hexdigest()[:16]
