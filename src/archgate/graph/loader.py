"""Graph construction from the producer's JSON document.

The document shape is an explicit, versioned schema validated here so the
analyzers never see upstream format drift::

    {"version": 1,
     "modules": [{"source": "...", "orphan": false, "lines": 0,
                  "dependencies": [{"resolved": "...", "circular": false,
                                    "external": false}]}],
     "exports": {"<package id>": ["<module id>", ...]}}
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union

from ..exceptions import MalformedInputError, UnknownModuleError
from ..logging_config import get_logger
from .models import Edge, Graph, Module

logger = get_logger(__name__)

SUPPORTED_SCHEMA_VERSIONS = frozenset({1})

# dependency-cruiser style dependencyTypes that mean "outside the tree"
EXTERNAL_DEPENDENCY_TYPES = frozenset(
    {"core", "npm", "npm-dev", "npm-optional", "npm-peer", "npm-bundled", "npm-no-pkg", "npm-unknown"}
)


def load_graph_file(path: Union[str, Path]) -> Graph:
    """Read and validate a graph document from disk."""
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MalformedInputError(
            "graph file not found", entity=str(p), remediation="pass the producer's output with --graph"
        )
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"cannot read graph file: {e}", entity=str(p))
    except json.JSONDecodeError as e:
        raise MalformedInputError(
            f"graph file is not valid JSON: {e}",
            entity=str(p),
            remediation="regenerate the graph with the extraction tool",
        )
    graph = load(raw)
    logger.debug(f"Loaded {len(graph)} modules / {graph.edge_count} internal edges from {p}")
    return graph


def load(raw_graph: Any) -> Graph:
    """Build an immutable Graph from a decoded graph document.

    Raises:
        MalformedInputError: on a wrong document shape, duplicate module ids,
            or an internal edge whose target is not a listed module.
    """
    if not isinstance(raw_graph, Mapping):
        raise MalformedInputError("graph document must be a JSON object")

    version = raw_graph.get("version", 1)
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise MalformedInputError(
            f"unsupported graph schema version {version!r}",
            remediation=f"emit schema version {max(SUPPORTED_SCHEMA_VERSIONS)}",
        )

    raw_modules = raw_graph.get("modules")
    if not isinstance(raw_modules, list):
        raise MalformedInputError("'modules' must be a list", entity="modules")

    modules: dict[str, Module] = {}
    for index, raw_module in enumerate(raw_modules):
        module = _parse_module(raw_module, index)
        if module.id in modules:
            raise MalformedInputError(
                f"duplicate module id {module.id!r}",
                entity=module.id,
                remediation="deduplicate modules in the graph producer output",
            )
        modules[module.id] = module

    adjacency: dict[str, tuple[str, ...]] = {}
    for module in modules.values():
        targets: list[str] = []
        seen: set[str] = set()
        for edge in module.internal_dependencies:
            if edge.resolved_target not in modules:
                raise UnknownModuleError(module.id, edge.resolved_target)
            if edge.resolved_target == module.id or edge.resolved_target in seen:
                continue
            seen.add(edge.resolved_target)
            targets.append(edge.resolved_target)
        adjacency[module.id] = tuple(targets)

    exports = _parse_exports(raw_graph.get("exports"))

    return Graph(
        modules=MappingProxyType(modules),
        adjacency=MappingProxyType(adjacency),
        declared_exports=MappingProxyType(exports),
        schema_version=version,
    )


def _parse_module(raw: Any, index: int) -> Module:
    if not isinstance(raw, Mapping):
        raise MalformedInputError(f"module #{index} must be an object", entity=f"modules[{index}]")

    source = raw.get("source")
    if not isinstance(source, str) or not source:
        raise MalformedInputError(
            f"module #{index} has no 'source' identifier", entity=f"modules[{index}]"
        )

    raw_deps = raw.get("dependencies", [])
    if not isinstance(raw_deps, list):
        raise MalformedInputError("'dependencies' must be a list", entity=source)

    lines = raw.get("lines", 0)
    if not isinstance(lines, int) or isinstance(lines, bool) or lines < 0:
        raise MalformedInputError("'lines' must be a non-negative integer", entity=source)

    return Module(
        id=source,
        dependencies=tuple(_parse_edge(dep, source) for dep in raw_deps),
        is_orphan=bool(raw.get("orphan", False)),
        line_count=lines,
    )


def _parse_edge(raw: Any, source: str) -> Edge:
    if not isinstance(raw, Mapping):
        raise MalformedInputError("dependency entries must be objects", entity=source)

    resolved = raw.get("resolved")
    if not isinstance(resolved, str) or not resolved:
        raise MalformedInputError(
            "dependency has no 'resolved' target",
            entity=source,
            remediation="the graph producer must resolve every dependency path",
        )

    external = bool(raw.get("external", False)) or bool(raw.get("coreModule", False))
    dep_types = raw.get("dependencyTypes") or []
    if isinstance(dep_types, list) and EXTERNAL_DEPENDENCY_TYPES.intersection(dep_types):
        external = True

    return Edge(
        resolved_target=resolved,
        is_circular=bool(raw.get("circular", False)),
        is_external=external,
    )


def _parse_exports(raw: Any) -> dict[str, tuple[str, ...]]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise MalformedInputError("'exports' must map package ids to module lists", entity="exports")

    exports: dict[str, tuple[str, ...]] = {}
    for package_id, members in raw.items():
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise MalformedInputError(
                "export lists must contain module ids", entity=f"exports[{package_id}]"
            )
        exports[str(package_id)] = tuple(dict.fromkeys(members))
    return exports
