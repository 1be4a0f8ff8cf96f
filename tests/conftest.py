"""Shared test fixtures for depsurface."""

import os
import threading
from pathlib import Path

import pytest

from depsurface.graph import PackageId, PackageNode, build_dependency_graph
from depsurface.metrics import LocReport, UnsafeDetails, UnsafeUsageReport
from depsurface.scanner import ScannerOutput, ScannerRecord


def pid(spec: str) -> PackageId:
    """'name' or 'name@version' -> PackageId (version defaults to 1.0.0)."""
    name, _, version = spec.partition("@")
    return PackageId(name=name, version=version or "1.0.0")


class FakeLineCounter:
    """Line counter returning canned reports keyed by directory name."""

    def __init__(self, reports=None, default=LocReport(total_loc=10, language_loc=8)):
        self.reports = reports or {}
        self.default = default
        self.calls = []
        self._lock = threading.Lock()

    def count(self, source_dir: Path) -> LocReport:
        with self._lock:
            self.calls.append(Path(source_dir))
        return self.reports.get(Path(source_dir).name, self.default)


class FakeScanner:
    """Unsafe scanner returning canned output per manifest directory name."""

    def __init__(self, outputs=None, error=None):
        self.outputs = outputs or {}
        self.error = error
        self.calls = []

    def scan(self, manifest_path: Path) -> ScannerOutput:
        self.calls.append(Path(manifest_path))
        if self.error is not None:
            raise self.error
        return self.outputs.get(Path(manifest_path).parent.name, ScannerOutput())


def unsafe_report(expressions=0, functions=0, forbids=False, unused_expressions=0):
    return UnsafeUsageReport(
        forbids_unsafe=forbids,
        used=UnsafeDetails(functions=functions, expressions=expressions),
        unused=UnsafeDetails(expressions=unused_expressions),
    )


def record(spec: str, report: UnsafeUsageReport) -> ScannerRecord:
    p = pid(spec)
    return ScannerRecord(name=p.name, version=p.version, report=report)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep user/project config files and DEPSURFACE_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DEPSURFACE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_graph(tmp_path):
    """Build a graph from {package: [dependencies]} using 'name@version' specs.

    Every package gets a manifest under tmp_path/<name>-<version>/Cargo.toml
    (not created on disk).
    """

    def _make(edges, workspace=(), build_scripts=()):
        names = set(edges)
        for deps in edges.values():
            names.update(deps)
        names.update(workspace)

        nodes = []
        for spec in sorted(names):
            p = pid(spec)
            nodes.append(
                PackageNode(
                    id=p,
                    manifest_path=tmp_path / f"{p.name}-{p.version}" / "Cargo.toml",
                    has_build_script=spec in build_scripts,
                )
            )
        pairs = [(pid(src), pid(dst)) for src, deps in edges.items() for dst in deps]
        return build_dependency_graph(nodes, pairs, [pid(w) for w in workspace])

    return _make


@pytest.fixture
def line_counter():
    return FakeLineCounter()
