"""Ownership attribution: which dependencies a package pulls in on its own.

Given a root R and its transitive dependency set D, the membership set is
M = D ∪ {R}. A member d of D is *shared* when

  * one of its direct dependents lies outside M, or
  * one of its direct dependents is itself shared.

Everything else in D is *exclusive* to R: removing R would remove it from
the build. Several paths from R to the same package do not make it shared;
only a dependent outside M does.

The shared set is the least fixpoint of the two rules above. It is computed
by seeding with members that have an outside dependent and walking forward
edges inside D, so the result is independent of iteration order and of DAG
shape (and still terminates if the resolver hands us a cycle).
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import DependencyGraph, PackageId
from .queries import direct_dependents, transitive_dependencies


@dataclass(frozen=True)
class DependencyPartition:
    """A root's transitive dependencies split by ownership."""

    root: PackageId
    exclusive: frozenset[PackageId]
    shared: frozenset[PackageId]

    @property
    def all(self) -> frozenset[PackageId]:
        return self.exclusive | self.shared


def partition_dependencies(
    graph: DependencyGraph,
    root: PackageId,
    dependencies: Optional[Iterable[PackageId]] = None,
) -> DependencyPartition:
    """Split the transitive dependencies of ``root`` into exclusive and shared.

    Args:
        graph: The resolved dependency graph.
        root: Package whose subtree is partitioned.
        dependencies: Precomputed transitive set of ``root``; computed from
            the graph when omitted.

    Raises:
        PackageNotFoundError: If ``root`` or a dependency is not in the graph.
    """
    if dependencies is None:
        members = transitive_dependencies(graph, root)
    else:
        members = set(dependencies)
        members.discard(root)
    membership = members | {root}

    # Seeds: members with a dependent outside the subtree
    shared: set[PackageId] = set()
    queue: deque[PackageId] = deque()
    for dep in members:
        if any(parent not in membership for parent in direct_dependents(graph, dep)):
            shared.add(dep)
            queue.append(dep)

    # Sharing propagates to everything a shared member depends on
    while queue:
        node = queue.popleft()
        for child in graph.adjacency.get(node, ()):
            if child in members and child not in shared:
                shared.add(child)
                queue.append(child)

    return DependencyPartition(
        root=root,
        exclusive=frozenset(members - shared),
        shared=frozenset(shared),
    )


def exclusive_dependencies(
    graph: DependencyGraph,
    root: PackageId,
    dependencies: Optional[Iterable[PackageId]] = None,
) -> frozenset[PackageId]:
    """Dependencies pulled in by ``root`` and by nothing else."""
    return partition_dependencies(graph, root, dependencies).exclusive


def partition_among_roots(
    graph: DependencyGraph, roots: Iterable[PackageId]
) -> dict[PackageId, frozenset[PackageId]]:
    """Compare several roots: what each one reaches that no other root does.

    A package reachable from two distinct roots belongs to neither root's
    exclusive set. Roots themselves are never attributed to another root.

    Returns:
        Mapping of root -> exclusively reachable packages.
    """
    root_list = sorted(set(roots))
    reach = {root: transitive_dependencies(graph, root) for root in root_list}

    seen_by: dict[PackageId, int] = {}
    for deps in reach.values():
        for dep in deps:
            seen_by[dep] = seen_by.get(dep, 0) + 1

    root_set = set(root_list)
    return {
        root: frozenset(d for d in deps if seen_by[d] == 1 and d not in root_set)
        for root, deps in reach.items()
    }
