"""Output formatters."""

from .base import BaseFormatter
from .json_formatter import JsonFormatter

__all__ = ["BaseFormatter", "JsonFormatter"]
