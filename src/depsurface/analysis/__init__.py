"""Report assembly over a dependency graph."""

from .engine import CodeAnalyzer

__all__ = ["CodeAnalyzer"]
