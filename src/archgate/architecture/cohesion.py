"""Export cohesion: do a package's exports share internal code?

For each export the closure is the set of same-package modules reachable
from it (the export included). Exports whose closures intersect are merged
with a disjoint-set forest; the number of resulting sets is the package's
cluster count. More than one cluster marks a split candidate, which is a
warning only: some packages are deliberate grab-bags of utilities.
"""

from typing import Dict, Iterable, List

from ..graph.algorithms import reachable
from ..graph.models import Graph, Package, PackageSet
from ..logging_config import get_logger
from .models import CohesionResult

logger = get_logger(__name__)


class DisjointSet:
    """Union-find with path halving and union by size."""

    def __init__(self, items: Iterable[str]):
        self._parent: Dict[str, str] = {}
        self._size: Dict[str, int] = {}
        for item in items:
            self._parent[item] = item
            self._size[item] = 1

    def find(self, item: str) -> str:
        parent = self._parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: str, b: str) -> str:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return root_a
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size[root_b]
        return root_a

    def groups(self) -> List[tuple[str, ...]]:
        """Disjoint sets, each sorted, ordered by their first member."""
        by_root: Dict[str, List[str]] = {}
        for item in self._parent:
            by_root.setdefault(self.find(item), []).append(item)
        return sorted(tuple(sorted(members)) for members in by_root.values())


def export_closure(graph: Graph, package: Package, export: str) -> frozenset[str]:
    """Same-package modules transitively reachable from ``export``."""
    return frozenset(reachable(graph.adjacency, export, allowed=package.module_ids.__contains__))


def cluster_exports(graph: Graph, package: Package) -> CohesionResult:
    """Cluster one package's exports by shared transitive dependencies."""
    exports = tuple(package.exports)
    if len(exports) < 2:
        return CohesionResult(package=package.id, exports=exports, skipped=True)

    dangling = [e for e in exports if e not in package.module_ids]
    if dangling:
        return CohesionResult(
            package=package.id,
            exports=exports,
            error=f"export(s) not in package: {', '.join(dangling)}",
        )

    closures: Dict[str, frozenset[str]] = {}
    for export in exports:
        if export not in closures:
            closures[export] = export_closure(graph, package, export)

    # Two exports share a module iff they end up with the same owner, which
    # unions every intersecting pair without comparing closures pairwise.
    forest = DisjointSet(exports)
    owner: Dict[str, str] = {}
    for export in exports:
        for module_id in closures[export]:
            first = owner.setdefault(module_id, export)
            if first != export:
                forest.union(first, export)

    return CohesionResult(package=package.id, exports=exports, clusters=tuple(forest.groups()))


def analyze_cohesion(graph: Graph, packages: PackageSet) -> Dict[str, CohesionResult]:
    """Cohesion result for every package, errors isolated per package."""
    results: Dict[str, CohesionResult] = {}
    for package in packages:
        result = cluster_exports(graph, package)
        if result.error:
            logger.warning(f"Cohesion failed for {package.id}: {result.error}")
        elif result.is_split_candidate:
            logger.info(f"{package.id} has {result.cluster_count} export clusters")
        results[package.id] = result
    return results
