"""Tests for per-file count collection."""

import pytest

from archgate.architecture import CycleMode
from archgate.architecture.cycles import detect_cycles
from archgate.exceptions import MalformedInputError
from archgate.ratchet import CIRCULAR_DEPS, COMPLEXITY, collect_counts, load_counts_file
from archgate.temporal import ComplexityRecord


class TestCollectCounts:
    def test_cycles_and_complexity(self, make_graph):
        graph = make_graph({"a.ts": ["b.ts"], "b.ts": ["a.ts"], "c.ts": []})
        counts = collect_counts(
            cycles=detect_cycles(graph, CycleMode.SCC),
            complexity=[ComplexityRecord("a.ts", 2), ComplexityRecord("c.ts", 0)],
        )
        assert counts == {CIRCULAR_DEPS: {"a.ts": 1, "b.ts": 1}, COMPLEXITY: {"a.ts": 2}}

    def test_extra_metrics(self):
        counts = collect_counts(extra={"no-explicit-any": {"a.ts": 3}})
        assert counts == {"no-explicit-any": {"a.ts": 3}}

    def test_tracked_metrics_filter(self):
        counts = collect_counts(
            complexity=[ComplexityRecord("a.ts", 1)],
            extra={"lint": {"a.ts": 1}},
            tracked_metrics=["lint"],
        )
        assert list(counts) == ["lint"]

    def test_nothing(self):
        assert collect_counts() == {}


class TestLoadCountsFile:
    def test_reads_tables(self, write_json):
        path = write_json("counts.json", {"lint": {"a.ts": 2}, "todo": [{"filePath": "b.ts", "count": 1}]})
        assert load_counts_file(path) == {"lint": {"a.ts": 2}, "todo": {"b.ts": 1}}

    def test_rejects_non_object(self, write_json):
        with pytest.raises(MalformedInputError):
            load_counts_file(write_json("counts.json", [1, 2]))

    def test_missing(self, tmp_path):
        with pytest.raises(MalformedInputError):
            load_counts_file(tmp_path / "none.json")
