"""Run cargo-geiger and parse its JSON report.

cargo-geiger only accepts a package manifest, not a virtual workspace
manifest, so callers invoke it once per workspace member.
"""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

from ..exceptions import ScannerFailure
from ..logging_config import get_logger
from ..metrics.models import UnsafeDetails, UnsafeUsageReport

logger = get_logger(__name__)

# geiger field name -> UnsafeDetails field name
_DETAIL_FIELDS = {
    "functions": "functions",
    "exprs": "expressions",
    "item_impls": "impls",
    "item_traits": "traits",
    "methods": "methods",
}


@dataclass(frozen=True)
class ScannerRecord:
    """Unsafe-usage verdict for one package as reported by the scanner."""

    name: str
    version: str
    report: UnsafeUsageReport

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.version)


@dataclass
class ScannerOutput:
    records: list[ScannerRecord] = field(default_factory=list)
    unscanned_files: list[str] = field(default_factory=list)


class UnsafeScanner(Protocol):
    """Anything that can scan one package manifest for unsafe code."""

    def scan(self, manifest_path: Path) -> ScannerOutput: ...


class GeigerScanner:
    """Invoke ``cargo geiger --output-format Json`` as a subprocess.

    Args:
        command: Command prefix, normally ``["cargo", "geiger"]``.
        timeout: Seconds before an invocation is abandoned (None = wait).
        extra_args: Additional arguments appended to every invocation.
    """

    def __init__(
        self,
        command: Sequence[str] = ("cargo", "geiger"),
        timeout: Optional[int] = None,
        extra_args: Sequence[str] = (),
    ):
        self.command = list(command)
        self.timeout = timeout
        self.extra_args = list(extra_args)

    def scan(self, manifest_path: Path) -> ScannerOutput:
        """Scan one manifest.

        Raises:
            ScannerFailure: On spawn failure, timeout, non-zero exit or
                unparsable output.
        """
        try:
            absolute = Path(manifest_path).resolve(strict=True)
        except OSError as e:
            raise ScannerFailure(Path(manifest_path), f"manifest not found: {e}") from e

        cmd = [
            *self.command,
            "--output-format",
            "Json",
            "--manifest-path",
            str(absolute),
            *self.extra_args,
        ]
        logger.info("Scanning %s for unsafe code", absolute)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ScannerFailure(absolute, f"{self.command[0]} not found") from e
        except subprocess.TimeoutExpired as e:
            raise ScannerFailure(absolute, f"timed out after {self.timeout}s") from e

        if result.returncode != 0:
            stderr = result.stderr.strip().splitlines()
            reason = f"exit status {result.returncode}"
            if stderr:
                reason += f": {stderr[-1]}"
            raise ScannerFailure(absolute, reason)

        return parse_geiger_report(result.stdout, manifest_path=absolute)


def parse_geiger_report(raw: str, manifest_path: Optional[Path] = None) -> ScannerOutput:
    """Parse cargo-geiger JSON into a ScannerOutput.

    Only the unsafe half of each safe/unsafe counter pair is kept.

    Raises:
        ScannerFailure: If the document is not valid geiger JSON.
    """
    label = manifest_path or Path("<geiger output>")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ScannerFailure(label, f"unparsable output: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("packages"), list):
        raise ScannerFailure(label, "unparsable output: no packages list")

    records = []
    for entry in data["packages"]:
        try:
            pkg_id = entry["package"]["id"]
            unsafety = entry["unsafety"]
            records.append(
                ScannerRecord(
                    name=pkg_id["name"],
                    version=pkg_id["version"],
                    report=UnsafeUsageReport(
                        forbids_unsafe=bool(unsafety["forbids_unsafe"]),
                        used=_parse_details(unsafety["used"]),
                        unused=_parse_details(unsafety["unused"]),
                    ),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ScannerFailure(label, f"unparsable package record: {e!r}") from e

    unscanned = [str(p) for p in data.get("used_but_not_scanned_files") or []]
    return ScannerOutput(records=records, unscanned_files=unscanned)


def _parse_details(info: dict[str, Any]) -> UnsafeDetails:
    values = {}
    for geiger_name, field_name in _DETAIL_FIELDS.items():
        count = info[geiger_name]
        values[field_name] = int(count["unsafe_"] if "unsafe_" in count else count["unsafe"])
    return UnsafeDetails(**values)
