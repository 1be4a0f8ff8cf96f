"""Data models for the resolved package dependency graph.

Edges are directed: adjacency[A] contains B means package A depends on B.
The graph is built once from resolver output and never mutated afterward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional


@dataclass(frozen=True)
class PackageId:
    """Identity of one resolved package.

    Two versions of the same crate are distinct packages. ``source`` is the
    registry or git source string, None for path packages.
    """

    name: str
    version: str
    source: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        """(name, version) pair used to match scanner records."""
        return (self.name, self.version)

    def __lt__(self, other: PackageId) -> bool:
        if not isinstance(other, PackageId):
            return NotImplemented
        return (self.name, self.version, self.source or "") < (
            other.name,
            other.version,
            other.source or "",
        )

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class PackageNode:
    """Per-package attributes exposed by the resolver."""

    id: PackageId
    manifest_path: Path
    has_build_script: bool = False
    in_workspace: bool = False

    @property
    def source_dir(self) -> Path:
        """Directory holding the package sources (the manifest's parent)."""
        return self.manifest_path.parent


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable dependency graph over PackageId (usually acyclic).

    ``adjacency`` and ``reverse`` hold sorted tuples so that iteration order
    is stable across runs.
    """

    packages: Mapping[PackageId, PackageNode] = field(default_factory=dict)
    adjacency: Mapping[PackageId, tuple[PackageId, ...]] = field(default_factory=dict)
    reverse: Mapping[PackageId, tuple[PackageId, ...]] = field(default_factory=dict)
    workspace_members: frozenset[PackageId] = frozenset()

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.adjacency.values())

    def __contains__(self, pid: object) -> bool:
        return pid in self.packages

    def __len__(self) -> int:
        return len(self.packages)
