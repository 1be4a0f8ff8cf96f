"""Unsafe-code scanner integration."""

from .adapter import ScanSummary, warm_unsafe_cache
from .geiger import GeigerScanner, ScannerOutput, ScannerRecord, UnsafeScanner, parse_geiger_report

__all__ = [
    "GeigerScanner",
    "ScannerOutput",
    "ScannerRecord",
    "UnsafeScanner",
    "parse_geiger_report",
    "ScanSummary",
    "warm_unsafe_cache",
]
