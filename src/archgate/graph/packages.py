"""Package grouping.

Partitions modules by a caller-supplied grouping rule (default: the first
two path segments), then derives each package's exports and the
package-level dependency relation. Modules no rule matches stay in the
graph for module-level cycle detection but take no part in package metrics.
"""

from collections import defaultdict
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..logging_config import get_logger
from .models import Graph, Package, PackageSet

logger = get_logger(__name__)

GroupingRule = Callable[[str], Optional[str]]

DEFAULT_ENTRY_POINT_NAMES = ("index", "__init__", "mod", "lib")


def prefix_grouping(depth: int = 2, roots: Iterable[str] = ()) -> GroupingRule:
    """Group modules by their first ``depth`` path segments.

    ``packages/core/src/a.ts`` -> ``packages/core`` at depth 2. A module with
    no path below the package directory matches nothing. With ``roots``,
    only modules under one of those prefixes are grouped.
    """
    if depth < 1:
        raise ValueError("depth must be at least 1")
    root_prefixes = tuple(r.strip("/") for r in roots if r.strip("/"))

    def rule(module_id: str) -> Optional[str]:
        if root_prefixes and not any(module_id.startswith(r + "/") for r in root_prefixes):
            return None
        parts = PurePosixPath(module_id).parts
        if len(parts) <= depth:
            return None
        return "/".join(parts[:depth])

    return rule


def group_into_packages(
    graph: Graph,
    grouping_rule: Optional[GroupingRule] = None,
    entry_point_names: Sequence[str] = DEFAULT_ENTRY_POINT_NAMES,
) -> PackageSet:
    """Partition ``graph`` into packages and link them.

    Args:
        graph: Loaded module graph
        grouping_rule: module id -> package id, or None to exclude the module
        entry_point_names: File stems recognised as aggregation entry points

    Returns:
        PackageSet with every package's fan-out / fan-in relation and exports
    """
    rule = grouping_rule or prefix_grouping()

    members: Dict[str, List[str]] = defaultdict(list)
    module_package: Dict[str, str] = {}
    ungrouped: List[str] = []
    for module_id in graph.modules:
        package_id = rule(module_id)
        if package_id is None:
            ungrouped.append(module_id)
            continue
        members[package_id].append(module_id)
        module_package[module_id] = package_id

    fan_out = _package_fan_out(graph, members, module_package)
    fan_in = invert_relation(fan_out)

    packages: Dict[str, Package] = {}
    for package_id in sorted(members):
        module_ids = frozenset(members[package_id])
        entry_point = find_entry_point(module_ids, entry_point_names)
        declared = graph.declared_exports.get(package_id)
        if declared is not None:
            exports = tuple(declared)
        elif entry_point is not None:
            exports = tuple(t for t in graph.targets(entry_point) if t in module_ids)
        else:
            exports = ()
        packages[package_id] = Package(
            id=package_id,
            module_ids=module_ids,
            fan_out=frozenset(fan_out.get(package_id, ())),
            fan_in=frozenset(fan_in.get(package_id, ())),
            exports=exports,
            entry_point=entry_point,
            exports_declared=declared is not None,
        )

    unmatched = sorted(set(graph.declared_exports) - set(packages))
    if unmatched:
        logger.warning(f"Declared exports for unknown packages ignored: {', '.join(unmatched)}")

    if ungrouped:
        logger.debug(f"{len(ungrouped)} modules matched no package rule")

    return PackageSet(
        packages=MappingProxyType(packages),
        module_package=MappingProxyType(module_package),
        ungrouped=tuple(sorted(ungrouped)),
    )


def invert_relation(relation: Dict[str, set[str]]) -> Dict[str, set[str]]:
    """Invert a directed relation: ``b in result[a]`` iff ``a in relation[b]``."""
    inverted: Dict[str, set[str]] = defaultdict(set)
    for source, targets in relation.items():
        for target in targets:
            inverted[target].add(source)
    return dict(inverted)


def find_entry_point(module_ids: Iterable[str], entry_point_names: Sequence[str]) -> Optional[str]:
    """Pick the package's aggregation entry point.

    Shallowest candidate wins, then the earlier name in ``entry_point_names``,
    then lexicographic order.
    """
    priority = {name: i for i, name in enumerate(entry_point_names)}
    candidates = []
    for module_id in module_ids:
        path = PurePosixPath(module_id)
        stem = path.name.split(".", 1)[0]
        if stem in priority:
            candidates.append((len(path.parts), priority[stem], module_id))
    if not candidates:
        return None
    return min(candidates)[2]


def _package_fan_out(
    graph: Graph,
    members: Dict[str, List[str]],
    module_package: Dict[str, str],
) -> Dict[str, set[str]]:
    relation: Dict[str, set[str]] = {}
    for package_id, module_ids in members.items():
        targets: set[str] = set()
        for module_id in module_ids:
            for target in graph.targets(module_id):
                target_package = module_package.get(target)
                if target_package is not None and target_package != package_id:
                    targets.add(target_package)
        relation[package_id] = targets
    return relation
