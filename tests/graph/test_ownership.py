"""Tests for graph/ownership.py - exclusive vs shared dependencies."""

import random

import pytest

from conftest import pid
from depsurface.exceptions import PackageNotFoundError
from depsurface.graph import (
    build_dependency_graph,
    exclusive_dependencies,
    partition_among_roots,
    partition_dependencies,
    transitive_dependencies,
)


def _ids(*specs):
    return frozenset(pid(s) for s in specs)


class TestPartitionDependencies:
    def test_diamond_inside_subtree_stays_exclusive(self, make_graph):
        """A -> {B, C}, B -> D, C -> D: every dependent of D is inside A's subtree."""
        graph = make_graph({"A": ["B", "C"], "B": ["D"], "C": ["D"]})
        part = partition_dependencies(graph, pid("A"))
        assert part.exclusive == _ids("B", "C", "D")
        assert part.shared == frozenset()

    def test_chain_is_exclusive(self, make_graph):
        """A -> B -> D with no other dependents."""
        graph = make_graph({"A": ["B"], "B": ["D"]})
        assert exclusive_dependencies(graph, pid("A")) == _ids("B", "D")

    def test_outside_dependent_marks_shared(self, make_graph):
        graph = make_graph({"app": ["A", "X"], "A": ["B"], "X": ["B"]}, workspace=["app"])
        part = partition_dependencies(graph, pid("A"))
        assert part.exclusive == frozenset()
        assert part.shared == _ids("B")

    def test_sharing_propagates_down(self, make_graph):
        """Everything under a shared node is shared, even if only the shared node depends on it."""
        graph = make_graph(
            {"app": ["A", "X"], "A": ["B", "E"], "X": ["B"], "B": ["C"], "C": ["D"]},
            workspace=["app"],
        )
        part = partition_dependencies(graph, pid("A"))
        assert part.shared == _ids("B", "C", "D")
        assert part.exclusive == _ids("E")

    def test_node_reached_via_exclusive_and_shared_paths_is_shared(self, make_graph):
        """D depends-on edges from exclusive E and shared B: shared wins."""
        graph = make_graph(
            {"app": ["A", "X"], "A": ["B", "E"], "X": ["B"], "B": ["D"], "E": ["D"]},
            workspace=["app"],
        )
        part = partition_dependencies(graph, pid("A"))
        assert pid("D") in part.shared
        assert pid("E") in part.exclusive

    def test_deep_shared_node_invalidates_earlier_exclusive_candidates(self, make_graph):
        """The outside dependent sits at the bottom of a long chain."""
        graph = make_graph(
            {"app": ["A", "X"], "A": ["B"], "B": ["C"], "C": ["D"], "D": ["E"], "X": ["D"]},
            workspace=["app"],
        )
        part = partition_dependencies(graph, pid("A"))
        assert part.exclusive == _ids("B", "C")
        assert part.shared == _ids("D", "E")

    def test_exclusive_is_subset_of_transitive(self, make_graph):
        graph = make_graph(
            {"app": ["A", "X"], "A": ["B", "C"], "B": ["D"], "X": ["C"], "C": ["F"]},
            workspace=["app"],
        )
        part = partition_dependencies(graph, pid("A"))
        transitive = transitive_dependencies(graph, pid("A"))
        assert part.exclusive <= transitive
        assert part.all == transitive
        assert not (part.exclusive & part.shared)

    def test_accepts_precomputed_dependencies(self, make_graph):
        graph = make_graph({"A": ["B"], "B": ["C"]})
        deps = transitive_dependencies(graph, pid("A"))
        assert exclusive_dependencies(graph, pid("A"), deps) == _ids("B", "C")

    def test_leaf_root_has_no_dependencies(self, make_graph):
        graph = make_graph({"A": ["B"]})
        part = partition_dependencies(graph, pid("B"))
        assert part.exclusive == frozenset() and part.shared == frozenset()

    def test_cycle_terminates(self, make_graph):
        graph = make_graph({"A": ["B"], "B": ["C"], "C": ["B"]})
        assert exclusive_dependencies(graph, pid("A")) == _ids("B", "C")

    def test_unknown_root_raises(self, make_graph):
        graph = make_graph({"A": ["B"]})
        with pytest.raises(PackageNotFoundError):
            partition_dependencies(graph, pid("nope"))


class TestOrderIndependence:
    EDGES = {
        "app": ["A", "X", "Y"],
        "A": ["B", "C", "E"],
        "B": ["D", "G"],
        "C": ["D"],
        "D": ["H"],
        "E": ["F"],
        "F": ["H"],
        "X": ["C"],
        "Y": ["G"],
        "G": ["I"],
    }

    def _shuffled_graph(self, base, seed):
        rng = random.Random(seed)
        nodes = list(base.packages.values())
        edges = [(src, dst) for src, deps in base.adjacency.items() for dst in deps]
        rng.shuffle(nodes)
        rng.shuffle(edges)
        return build_dependency_graph(nodes, edges, base.workspace_members)

    def test_shuffled_inputs_give_same_partition(self, make_graph):
        base = make_graph(self.EDGES, workspace=["app"])
        expected = partition_dependencies(base, pid("A"))
        assert expected.exclusive == _ids("B", "E", "F")
        assert expected.shared == _ids("C", "D", "G", "H", "I")

        for seed in range(25):
            graph = self._shuffled_graph(base, seed)
            deps = list(transitive_dependencies(graph, pid("A")))
            random.Random(seed).shuffle(deps)
            assert partition_dependencies(graph, pid("A"), deps) == expected


class TestPartitionAmongRoots:
    def test_dependency_of_two_roots_belongs_to_neither(self, make_graph):
        """Siblings B and C under A both reach D."""
        graph = make_graph({"A": ["B", "C"], "B": ["D"], "C": ["D"]})
        result = partition_among_roots(graph, [pid("B"), pid("C")])
        assert result == {pid("B"): frozenset(), pid("C"): frozenset()}

    def test_unique_reach_is_exclusive(self, make_graph):
        graph = make_graph({"B": ["D", "E"], "C": ["D", "F"]})
        result = partition_among_roots(graph, [pid("B"), pid("C")])
        assert result[pid("B")] == _ids("E")
        assert result[pid("C")] == _ids("F")

    def test_roots_are_not_attributed_to_other_roots(self, make_graph):
        graph = make_graph({"B": ["C"], "C": ["D"]})
        result = partition_among_roots(graph, [pid("B"), pid("C")])
        assert pid("C") not in result[pid("B")]
        assert result[pid("C")] == frozenset()
        assert result[pid("B")] == frozenset()

    def test_single_root_gets_whole_subtree(self, make_graph):
        graph = make_graph({"B": ["C"], "C": ["D"]})
        assert partition_among_roots(graph, [pid("B")]) == {pid("B"): _ids("C", "D")}
