"""Tests for metrics/aggregate.py."""

from conftest import FakeLineCounter, pid, unsafe_report
from depsurface.metrics import (
    LocReport,
    MetricsCache,
    PackageMetrics,
    UnsafeDetails,
    collect_package_metrics,
    summarize_dependencies,
    summarize_metrics,
)


class TestSummarizeDependencies:
    def test_empty_set_is_zero(self, make_graph, line_counter):
        graph = make_graph({"a": []})
        report = summarize_dependencies(graph, MetricsCache(line_counter), [])
        assert report.total_count == 0
        assert report.summed_loc == LocReport()

    def test_scanner_gap_counts_loc_but_not_unsafe(self, make_graph):
        """E@1.0.0 was never reported by the scanner."""
        graph = make_graph({"app": ["a", "E@1.0.0"]}, workspace=["app"])
        counter = FakeLineCounter({"a-1.0.0": LocReport(100, 90), "E-1.0.0": LocReport(50, 40)})
        cache = MetricsCache(counter)
        cache.record_unsafe_report(("a", "1.0.0"), unsafe_report(expressions=3))

        report = summarize_dependencies(graph, cache, [pid("a"), pid("E@1.0.0")])
        assert report.total_count == 2
        assert report.summed_loc == LocReport(150, 130)
        assert report.count_scanned_for_unsafe == 1
        assert report.count_using_unsafe == 1
        assert report.summed_used_unsafe_details == UnsafeDetails(expressions=3)

    def test_counting_rules(self, make_graph, line_counter):
        graph = make_graph(
            {"app": ["safe", "forbid", "unsafe", "quiet"]},
            workspace=["app"],
            build_scripts=["unsafe", "quiet"],
        )
        cache = MetricsCache(line_counter)
        cache.record_unsafe_report(("safe", "1.0.0"), unsafe_report())
        cache.record_unsafe_report(("forbid", "1.0.0"), unsafe_report(forbids=True))
        cache.record_unsafe_report(("unsafe", "1.0.0"), unsafe_report(expressions=2, functions=1))
        cache.record_unsafe_report(("quiet", "1.0.0"), unsafe_report(functions=5))

        report = summarize_dependencies(
            graph, cache, [pid("safe"), pid("forbid"), pid("unsafe"), pid("quiet")]
        )
        assert report.total_count == 4
        assert report.count_with_build_script == 2
        assert report.count_scanned_for_unsafe == 4
        assert report.count_forbidding_unsafe == 1
        assert report.count_using_unsafe == 1
        assert report.summed_used_unsafe_details == UnsafeDetails(functions=6, expressions=2)

    def test_duplicates_count_once(self, make_graph, line_counter):
        graph = make_graph({"app": ["a", "b"]}, workspace=["app"])
        cache = MetricsCache(line_counter)
        report = summarize_dependencies(graph, cache, [pid("a"), pid("b"), pid("a")])
        assert report.total_count == 2
        assert report.summed_loc == LocReport(20, 16)

    def test_shared_source_dir_counted_once(self, make_graph, line_counter):
        graph = make_graph({"app": ["a", "b", "c"]}, workspace=["app"])
        cache = MetricsCache(line_counter)
        summarize_dependencies(graph, cache, [pid("a"), pid("b")])
        summarize_dependencies(graph, cache, [pid("a"), pid("b"), pid("c")])
        assert len(line_counter.calls) == 3
        assert cache.loc_hits == 2


class TestSummarizeMetrics:
    def test_first_occurrence_of_an_id_wins(self):
        first = PackageMetrics(id=pid("a"), loc=LocReport(1, 1))
        second = PackageMetrics(id=pid("a"), loc=LocReport(99, 99))
        report = summarize_metrics([first, second])
        assert report.total_count == 1
        assert report.summed_loc == LocReport(1, 1)


class TestCollectPackageMetrics:
    def test_collects_node_and_cache_data(self, make_graph):
        graph = make_graph({"app": ["cc"]}, workspace=["app"], build_scripts=["cc"])
        cache = MetricsCache(FakeLineCounter({"cc-1.0.0": LocReport(7, 3)}))
        m = collect_package_metrics(graph, cache, pid("cc"))
        assert m.loc == LocReport(7, 3)
        assert m.has_build_script
        assert m.unsafe is None
