"""Dependency graph: model, queries and ownership attribution."""

from .builder import build_dependency_graph
from .cargo_metadata import graph_from_cargo_metadata, load_cargo_metadata_file, run_cargo_metadata
from .models import DependencyGraph, PackageId, PackageNode
from .ownership import (
    DependencyPartition,
    exclusive_dependencies,
    partition_among_roots,
    partition_dependencies,
)
from .queries import (
    all_dependencies,
    direct_dependencies,
    direct_dependents,
    get_package,
    transitive_dependencies,
    workspace_direct_dependencies,
    workspace_roots,
)

__all__ = [
    "DependencyGraph",
    "PackageId",
    "PackageNode",
    "build_dependency_graph",
    "graph_from_cargo_metadata",
    "load_cargo_metadata_file",
    "run_cargo_metadata",
    "DependencyPartition",
    "partition_dependencies",
    "exclusive_dependencies",
    "partition_among_roots",
    "get_package",
    "workspace_roots",
    "direct_dependencies",
    "direct_dependents",
    "transitive_dependencies",
    "workspace_direct_dependencies",
    "all_dependencies",
]
