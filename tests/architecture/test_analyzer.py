"""Tests for the analyzer orchestration and the public analyze() API."""

import json

import pytest

from archgate import analyze
from archgate.architecture import ArchitectureAnalyzer, CycleMode, UnitClass
from archgate.config import ArchgateConfig
from archgate.exceptions import InvalidConfigError, MalformedInputError
from archgate.graph import group_into_packages


def _run(graph, **kwargs):
    kwargs.setdefault("cycle_mode", CycleMode.SCC)
    classes = kwargs.pop("unit_classes", None)
    return ArchitectureAnalyzer(**kwargs).analyze(graph, group_into_packages(graph), classes)


@pytest.fixture
def cyclic_graph(make_graph):
    return make_graph({"p/a/x.ts": ["p/b/x.ts"], "p/b/x.ts": ["p/a/x.ts"]})


class TestArchitectureAnalyzer:
    """Test assembling per-package rows and hard failures."""

    def test_clean_graph_passes(self, scenario_a_graph):
        report = _run(scenario_a_graph)
        assert report.passed
        rows = {r.package: r for r in report.packages}
        assert rows["pkgs/api"].fan_out == 1
        assert rows["pkgs/api"].depth == 1
        assert rows["pkgs/core"].instability == 0.0
        assert {r.status for r in report.packages} == {"ok"}

    def test_cycles_over_limit_fail(self, cyclic_graph):
        report = _run(cyclic_graph)
        assert not report.passed
        assert {f.kind for f in report.failures} == {"cycle"}
        assert {f.entity for f in report.failures} == {"p/a/x.ts -> p/b/x.ts", "p/b/x.ts -> p/a/x.ts"}
        assert all(f.remediation for f in report.failures)

    def test_cycles_within_limit_pass(self, cyclic_graph):
        assert _run(cyclic_graph, allowed_cycles=1).passed

    def test_depth_on_cycle_is_finite(self, cyclic_graph):
        report = _run(cyclic_graph, allowed_cycles=1)
        assert {r.package: r.depth for r in report.packages} == {"p/a": 2, "p/b": 2}

    def test_split_candidate_is_warning(self, scenario_d_graph):
        report = _run(scenario_d_graph)
        assert report.passed
        row = report.packages[0]
        assert row.status == "warning"
        assert row.cluster_count == 2
        assert [c.package for c in report.split_candidates] == ["pkgs/util"]

    def test_depth_violation_fails_package(self, make_graph):
        adjacency = {f"p/n{i}/x.ts": [f"p/n{i + 1}/x.ts"] for i in range(3)}
        adjacency["p/n3/x.ts"] = []
        report = _run(make_graph(adjacency), library_max_depth=2)
        rows = {r.package: r for r in report.packages}
        assert rows["p/n0"].status == "fail"
        assert rows["p/n1"].status == "ok"
        assert [f.entity for f in report.failures] == ["p/n0"]

    def test_deployable_class_uses_its_limit(self, make_graph):
        adjacency = {f"p/n{i}/x.ts": [f"p/n{i + 1}/x.ts"] for i in range(3)}
        adjacency["p/n3/x.ts"] = []
        report = _run(
            make_graph(adjacency),
            library_max_depth=2,
            deployable_max_depth=8,
            unit_classes={"p/n0": UnitClass.DEPLOYABLE},
        )
        assert report.passed
        assert report.packages[0].unit_class == "deployable"

    def test_cohesion_error_is_error_status(self, make_graph):
        graph = make_graph(
            {"p/a/x.ts": [], "p/a/y.ts": []},
            exports={"p/a": ["p/a/x.ts", "p/q/missing.ts"]},
        )
        report = _run(graph)
        assert report.packages[0].status == "error"
        assert report.passed

    def test_sequential_matches_threaded(self, scenario_d_graph):
        sequential = _run(scenario_d_graph, workers=1).to_dict()
        threaded = _run(scenario_d_graph, workers=4).to_dict()
        assert sequential == threaded

    def test_report_is_json_serializable(self, cyclic_graph):
        data = _run(cyclic_graph).to_dict()
        assert json.loads(json.dumps(data))["cycles"]["cycleCount"] == 1


class TestAnalyzeApi:
    """Test the top-level analyze() entry point."""

    def test_requires_cycle_mode(self, isolated_env, scenario_a_graph):
        with pytest.raises(InvalidConfigError):
            analyze(scenario_a_graph)

    def test_with_override(self, isolated_env, scenario_a_graph):
        report = analyze(scenario_a_graph, cycle_mode="flagged")
        assert report.cycles.mode is CycleMode.FLAGGED
        assert report.passed

    def test_from_path(self, isolated_env, write_json):
        path = write_json(
            "deps.json",
            {"version": 1, "modules": [{"source": "apps/web/main.ts"}, {"source": "tool.ts"}]},
        )
        report = analyze(path, ArchgateConfig(cycle_mode="scc"))
        assert [r.package for r in report.packages] == ["apps/web"]
        assert report.packages[0].unit_class == "deployable"
        assert report.ungrouped_modules == 1

    def test_malformed_graph_aborts(self, isolated_env, write_json):
        path = write_json("deps.json", {"modules": [{"source": "a.ts", "dependencies": [{"resolved": "b.ts"}]}]})
        with pytest.raises(MalformedInputError):
            analyze(path, ArchgateConfig(cycle_mode="scc"))
