"""
depsurface - code surface of Cargo dependencies

Attributes lines of code and unsafe-code usage across a resolved dependency
graph, separating what each direct dependency pulls in on its own from what
it shares with its siblings.
"""

__version__ = "0.1.0"

from .api import analyze, analyze_graph, load_graph
from .metrics.models import CodeReport, DependencySetReport, LocReport, UnsafeUsageReport

__all__ = [
    "analyze",  # Main entry point
    "analyze_graph",
    "load_graph",
    "CodeReport",
    "DependencySetReport",
    "LocReport",
    "UnsafeUsageReport",
]
