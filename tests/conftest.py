"""Shared test fixtures for archgate."""

import json
import os
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from archgate.graph import Graph, load


def build_raw_graph(
    adjacency: Dict[str, List[str]],
    circular: Iterable[Tuple[str, str]] = (),
    external: Optional[Dict[str, List[str]]] = None,
    exports: Optional[Dict[str, List[str]]] = None,
    orphans: Iterable[str] = (),
) -> dict:
    """Producer-shaped document from a plain adjacency dict."""
    circular_set = set(circular)
    orphan_set = set(orphans)
    external = external or {}
    modules = []
    for source, targets in adjacency.items():
        deps = [
            {"resolved": t, "circular": (source, t) in circular_set, "external": False}
            for t in targets
        ]
        deps += [{"resolved": t, "external": True} for t in external.get(source, [])]
        modules.append({"source": source, "dependencies": deps, "orphan": source in orphan_set})
    raw: dict = {"version": 1, "modules": modules}
    if exports is not None:
        raw["exports"] = exports
    return raw


@pytest.fixture
def make_graph():
    """Factory: adjacency dict (+ options) -> loaded Graph."""

    def _make(adjacency: Dict[str, List[str]], **kwargs) -> Graph:
        return load(build_raw_graph(adjacency, **kwargs))

    return _make


@pytest.fixture
def write_json(tmp_path):
    """Factory: write a JSON document under tmp_path and return its path."""

    def _write(name: str, data) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)

    return _write


@pytest.fixture
def scenario_a_graph(make_graph):
    """Packages core (no deps) and api (two modules importing core)."""
    return make_graph(
        {
            "pkgs/core/x.ts": [],
            "pkgs/api/a.ts": ["pkgs/core/x.ts"],
            "pkgs/api/b.ts": ["pkgs/core/x.ts"],
        }
    )


@pytest.fixture
def scenario_d_graph(make_graph):
    """Package util exporting e1, e2 (sharing a helper) and a disjoint e3."""
    return make_graph(
        {
            "pkgs/util/index.ts": ["pkgs/util/e1.ts", "pkgs/util/e2.ts", "pkgs/util/e3.ts"],
            "pkgs/util/e1.ts": ["pkgs/util/shared.ts"],
            "pkgs/util/e2.ts": ["pkgs/util/shared.ts"],
            "pkgs/util/e3.ts": [],
            "pkgs/util/shared.ts": [],
        }
    )


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with no user/project config and no ARCHGATE_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("ARCHGATE_"):
            monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture
def write_graph(write_json):
    """Factory: adjacency dict (+ options) -> path of a graph document."""

    def _write(adjacency: Dict[str, List[str]], name: str = "deps.json", **kwargs) -> str:
        return write_json(name, build_raw_graph(adjacency, **kwargs))

    return _write
