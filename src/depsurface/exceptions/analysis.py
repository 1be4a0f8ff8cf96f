"""Analysis-related exceptions: scanning, line counting, caching, assembly."""

from pathlib import Path
from typing import Any

from .base import DepSurfaceError


class AnalysisError(DepSurfaceError):
    """Base class for analysis-related errors."""
    pass


class ScannerFailure(AnalysisError):
    """Raised when the unsafe-code scanner fails or returns unparsable output.

    Fatal to the whole run: no partial reports are produced.
    """

    def __init__(self, manifest_path: Path, reason: str):
        super().__init__(
            f"Unsafe scanner failed for {manifest_path}",
            details={"manifest_path": str(manifest_path), "reason": reason},
        )
        self.manifest_path = manifest_path
        self.reason = reason


class LineCountError(AnalysisError):
    """Raised when a package source tree cannot be read for line counting."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot count lines in {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class CacheConsistencyError(AnalysisError):
    """Raised when a cache entry is missing right after it was written."""

    def __init__(self, key: Any):
        super().__init__(
            "Metrics cache lost an entry after writing it",
            details={"key": str(key)},
        )
        self.key = key


class ReportAssemblyError(AnalysisError):
    """Raised when a code report cannot be built for a package."""

    def __init__(self, package: Any, operation: str, reason: str):
        super().__init__(
            f"Failed to {operation} for {package}",
            details={"package": str(package), "operation": operation, "reason": reason},
        )
        self.package = package
        self.operation = operation
        self.reason = reason
