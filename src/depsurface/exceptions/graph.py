"""Dependency graph exceptions: lookups and loading."""

from typing import Any

from .base import DepSurfaceError


class GraphError(DepSurfaceError):
    """Base class for dependency-graph errors."""

    pass


class PackageNotFoundError(GraphError):
    """Raised when a queried package is absent from the graph."""

    def __init__(self, package: Any):
        super().__init__(
            f"Package not found in dependency graph: {package}",
            details={"package": str(package)},
        )
        self.package = package


class GraphLoadError(GraphError):
    """Raised when cargo metadata cannot be obtained or understood."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Cannot load dependency graph from {source}",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason
