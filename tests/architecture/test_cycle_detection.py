"""Tests for flagged and SCC cycle detection."""

import pytest

from archgate.architecture import CycleMode
from archgate.architecture.cycles import cycle_counts_by_module, detect_cycles


@pytest.fixture
def two_cycles(make_graph):
    # a <-> b and c -> d -> e -> c; producer flagged only a -> b
    return make_graph(
        {
            "a.ts": ["b.ts"],
            "b.ts": ["a.ts"],
            "c.ts": ["d.ts"],
            "d.ts": ["e.ts"],
            "e.ts": ["c.ts"],
            "f.ts": ["a.ts"],
        },
        circular=[("a.ts", "b.ts")],
    )


class TestFlaggedMode:
    """Test trusting the producer's circular flags."""

    def test_collects_flagged_pairs(self, two_cycles):
        report = detect_cycles(two_cycles, CycleMode.FLAGGED)
        assert report.pairs == (("a.ts", "b.ts"),)
        assert report.cycle_count == 1
        assert report.groups == ()

    def test_string_mode(self, two_cycles):
        assert detect_cycles(two_cycles, "flagged").mode is CycleMode.FLAGGED

    def test_no_flags_no_cycles(self, make_graph):
        graph = make_graph({"a.ts": ["b.ts"], "b.ts": ["a.ts"]})
        assert detect_cycles(graph, CycleMode.FLAGGED).cycle_count == 0


class TestSCCMode:
    """Test recomputing cycles from the adjacency."""

    def test_ignores_flags(self, two_cycles):
        report = detect_cycles(two_cycles, CycleMode.SCC)
        assert report.cycle_count == 2
        assert [g.members for g in report.groups] == [("a.ts", "b.ts"), ("c.ts", "d.ts", "e.ts")]

    def test_pairs_are_cycle_edges_only(self, two_cycles):
        report = detect_cycles(two_cycles, CycleMode.SCC)
        assert ("f.ts", "a.ts") not in report.pairs
        assert ("a.ts", "b.ts") in report.pairs
        assert ("b.ts", "a.ts") in report.pairs
        assert len(report.pairs) == 5

    def test_acyclic(self, make_graph):
        graph = make_graph({"a.ts": ["b.ts"], "b.ts": []})
        report = detect_cycles(graph, "scc")
        assert report.cycle_count == 0
        assert not report.exceeds(0)

    def test_invalid_mode(self, make_graph):
        with pytest.raises(ValueError):
            detect_cycles(make_graph({"a.ts": []}), "auto")


class TestCycleReport:
    def test_exceeds(self, two_cycles):
        report = detect_cycles(two_cycles, CycleMode.SCC)
        assert report.exceeds(1)
        assert not report.exceeds(2)

    def test_to_dict(self, two_cycles):
        data = detect_cycles(two_cycles, CycleMode.FLAGGED).to_dict()
        assert data == {"mode": "flagged", "cycleCount": 1, "pairs": [["a.ts", "b.ts"]], "groups": []}

    def test_counts_by_module(self, two_cycles):
        counts = cycle_counts_by_module(detect_cycles(two_cycles, CycleMode.SCC))
        assert counts == {"a.ts": 1, "b.ts": 1, "c.ts": 1, "d.ts": 1, "e.ts": 1}
