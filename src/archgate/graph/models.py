"""Data models for the module dependency graph.

Levels:
  Modules and edges   - loaded once from the graph producer, immutable
  Packages            - derived by a grouping rule, recomputed every run

Modules reference each other by id only (arena + index): the graph owns a
single id -> Module table and every derived structure stores ids, so cycle
safety is a plain set-membership check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


@dataclass(frozen=True)
class Edge:
    """A dependency from the owning module to ``resolved_target``."""

    resolved_target: str
    is_circular: bool = False  # pre-flagged by the producer
    is_external: bool = False  # outside the analyzed tree (third-party, runtime)


@dataclass(frozen=True)
class Module:
    """A single source file as emitted by the graph producer."""

    id: str  # canonical path
    dependencies: tuple[Edge, ...] = ()
    is_orphan: bool = False
    line_count: int = 0

    @property
    def internal_dependencies(self) -> tuple[Edge, ...]:
        return tuple(e for e in self.dependencies if not e.is_external)


@dataclass(frozen=True)
class Graph:
    """Immutable module graph.

    ``adjacency[a]`` lists the distinct internal targets of ``a`` in input
    order; external edges never appear there.
    """

    modules: Mapping[str, Module] = field(default_factory=lambda: MappingProxyType({}))
    adjacency: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    declared_exports: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    schema_version: int = 1

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.modules

    @property
    def ids(self) -> list[str]:
        return list(self.modules)

    @property
    def orphans(self) -> list[str]:
        return sorted(m.id for m in self.modules.values() if m.is_orphan)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.adjacency.values())

    def targets(self, module_id: str) -> tuple[str, ...]:
        return self.adjacency.get(module_id, ())

    def edges(self) -> Iterator[tuple[str, Edge]]:
        """Yield every (source id, edge) pair, external edges included."""
        for module in self.modules.values():
            for edge in module.dependencies:
                yield module.id, edge


@dataclass(frozen=True)
class Package:
    """A path-prefix group of modules.

    ``fan_out`` holds the ids of other packages this one depends on through
    at least one internal edge; ``fan_in`` is the inverse of that relation.
    """

    id: str
    module_ids: frozenset[str]
    fan_out: frozenset[str] = frozenset()
    fan_in: frozenset[str] = frozenset()
    exports: tuple[str, ...] = ()
    entry_point: Optional[str] = None
    exports_declared: bool = False  # exports came from the graph document

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.module_ids


@dataclass(frozen=True)
class PackageSet:
    """Result of grouping: packages by id plus modules no rule matched."""

    packages: Mapping[str, Package]
    module_package: Mapping[str, str]  # module id -> package id
    ungrouped: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages.values())

    def __len__(self) -> int:
        return len(self.packages)

    def __getitem__(self, package_id: str) -> Package:
        return self.packages[package_id]

    def package_of(self, module_id: str) -> Optional[str]:
        return self.module_package.get(module_id)
