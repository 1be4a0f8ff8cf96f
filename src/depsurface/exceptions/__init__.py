"""Exception hierarchy for depsurface."""

from .analysis import (
    AnalysisError,
    CacheConsistencyError,
    LineCountError,
    ReportAssemblyError,
    ScannerFailure,
)
from .base import DepSurfaceError
from .config import ConfigurationError, InvalidConfigError
from .graph import GraphError, GraphLoadError, PackageNotFoundError

__all__ = [
    "DepSurfaceError",
    "GraphError",
    "GraphLoadError",
    "PackageNotFoundError",
    "AnalysisError",
    "ScannerFailure",
    "LineCountError",
    "CacheConsistencyError",
    "ReportAssemblyError",
    "ConfigurationError",
    "InvalidConfigError",
]
