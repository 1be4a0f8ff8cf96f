"""Base formatter interface for depsurface output rendering."""

from abc import ABC, abstractmethod
from typing import List

from ..metrics.models import CodeReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, reports: List[CodeReport]) -> None:
        """Write reports to stdout."""

    @abstractmethod
    def format(self, reports: List[CodeReport]) -> str:
        """Return formatted string representation of reports."""
