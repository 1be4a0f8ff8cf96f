"""Read-only queries over a DependencyGraph.

All functions are pure and raise PackageNotFoundError for unknown ids.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable

from ..exceptions import PackageNotFoundError
from .models import DependencyGraph, PackageId, PackageNode


def get_package(graph: DependencyGraph, pid: PackageId) -> PackageNode:
    try:
        return graph.packages[pid]
    except KeyError:
        raise PackageNotFoundError(pid) from None


def workspace_roots(graph: DependencyGraph) -> set[PackageId]:
    """Packages that are build targets of the analyzed project."""
    return set(graph.workspace_members)


def direct_dependencies(graph: DependencyGraph, node: PackageId) -> set[PackageId]:
    _require(graph, node)
    return set(graph.adjacency.get(node, ()))


def direct_dependents(graph: DependencyGraph, node: PackageId) -> set[PackageId]:
    """Immediate reverse edges: packages that depend on ``node``."""
    _require(graph, node)
    return set(graph.reverse.get(node, ()))


def transitive_dependencies(graph: DependencyGraph, root: PackageId) -> set[PackageId]:
    """Everything reachable from ``root`` along forward edges, root excluded.

    BFS with a visited set, so a cycle back to the root (or anywhere else)
    terminates.
    """
    _require(graph, root)
    return _reachable(graph, [root]) - {root}


def workspace_direct_dependencies(graph: DependencyGraph) -> set[PackageId]:
    """External packages linked directly from a workspace member."""
    direct: set[PackageId] = set()
    for member in graph.workspace_members:
        for dep in graph.adjacency.get(member, ()):
            if dep not in graph.workspace_members:
                direct.add(dep)
    return direct


def all_dependencies(graph: DependencyGraph) -> set[PackageId]:
    """Every external package reachable from the workspace."""
    return _reachable(graph, graph.workspace_members) - set(graph.workspace_members)


def _reachable(graph: DependencyGraph, starts: Iterable[PackageId]) -> set[PackageId]:
    visited: set[PackageId] = set()
    queue: deque[PackageId] = deque()
    for start in starts:
        queue.extend(graph.adjacency.get(start, ()))
    while queue:
        node = queue.popleft()
        if node in visited:
            continue
        visited.add(node)
        queue.extend(n for n in graph.adjacency.get(node, ()) if n not in visited)
    return visited


def _require(graph: DependencyGraph, pid: PackageId) -> None:
    if pid not in graph.packages:
        raise PackageNotFoundError(pid)
