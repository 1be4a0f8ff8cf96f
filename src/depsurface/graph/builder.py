"""Build a DependencyGraph from package records and dependency edges."""

from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Iterable

from ..exceptions import PackageNotFoundError
from .models import DependencyGraph, PackageId, PackageNode


def build_dependency_graph(
    packages: Iterable[PackageNode],
    edges: Iterable[tuple[PackageId, PackageId]],
    workspace_members: Iterable[PackageId] = (),
) -> DependencyGraph:
    """Construct an immutable dependency graph.

    Args:
        packages: Every resolved package.
        edges: (from, to) pairs meaning ``from`` depends on ``to``.
            Duplicate edges collapse into one.
        workspace_members: Packages that are build targets of the project.
            Nodes listed here are marked ``in_workspace``.

    Raises:
        PackageNotFoundError: If an edge or workspace member names a package
            missing from ``packages``.
    """
    members = frozenset(workspace_members)

    nodes: dict[PackageId, PackageNode] = {}
    for node in packages:
        if node.id in members and not node.in_workspace:
            node = PackageNode(
                id=node.id,
                manifest_path=node.manifest_path,
                has_build_script=node.has_build_script,
                in_workspace=True,
            )
        nodes[node.id] = node

    for member in members:
        if member not in nodes:
            raise PackageNotFoundError(member)

    forward: dict[PackageId, set[PackageId]] = defaultdict(set)
    backward: dict[PackageId, set[PackageId]] = defaultdict(set)
    for src, dst in edges:
        if src not in nodes:
            raise PackageNotFoundError(src)
        if dst not in nodes:
            raise PackageNotFoundError(dst)
        forward[src].add(dst)
        backward[dst].add(src)

    adjacency = {pid: tuple(sorted(forward.get(pid, ()))) for pid in nodes}
    reverse = {pid: tuple(sorted(backward.get(pid, ()))) for pid in nodes}

    return DependencyGraph(
        packages=MappingProxyType(nodes),
        adjacency=MappingProxyType(adjacency),
        reverse=MappingProxyType(reverse),
        workspace_members=members,
    )
