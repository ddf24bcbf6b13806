"""Dependency depth: longest package path down to a leaf.

depth(P) = 0 when P has no package-level fan-out, otherwise
1 + max(depth(D) for D in fan_out(P)).

The walk keeps the packages on the current call path in ``visiting``; a
dependency already on the path counts as depth 0 instead of being entered
again, so cycles terminate. Reporting the cycle itself is the cycle
detector's job.
"""

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple

from ..graph.algorithms import tarjan_scc
from ..graph.models import PackageSet
from ..logging_config import get_logger
from .models import DepthResult, DepthViolation, UnitClass

logger = get_logger(__name__)

MemoKey = Tuple[str, FrozenSet[str]]


@dataclass
class _Frame:
    package: str
    key: MemoKey
    deps: Iterator[str]
    best: int = 0


class DepthCalculator:
    """Memoized, cycle-safe depth over a package relation.

    A package on the active path can only influence the depth of a package
    in its own strongly connected component, so results are cached under
    ``(package, on-path members of its component)``. Packages outside any
    cycle always get an empty key and are computed once; a value truncated
    by one path is never reused for a path with a different truncation.

    The walk uses an explicit stack, so chain length is not bounded by the
    interpreter's recursion limit.
    """

    def __init__(self, fan_out: Mapping[str, Iterable[str]]):
        self._fan_out = {p: sorted(d for d in deps if d != p) for p, deps in fan_out.items()}
        self._component: Dict[str, FrozenSet[str]] = {}
        nodes = set(self._fan_out).union(*self._fan_out.values())
        for members in tarjan_scc(self._fan_out, nodes):
            if len(members) > 1:
                component = frozenset(members)
                for member in members:
                    self._component[member] = component
        self._memo: Dict[MemoKey, int] = {}

    def max_depth(self, package_id: str) -> int:
        root_key = self._key(package_id, frozenset())
        if root_key in self._memo:
            return self._memo[root_key]

        visiting = {package_id}
        frames = [_Frame(package_id, root_key, iter(self._fan_out.get(package_id, ())))]
        depth = 0
        while frames:
            frame = frames[-1]
            entered = False
            for dep in frame.deps:
                if dep in visiting:
                    frame.best = max(frame.best, 1)
                    continue
                key = self._key(dep, visiting)
                cached = self._memo.get(key)
                if cached is not None:
                    frame.best = max(frame.best, 1 + cached)
                    continue
                visiting.add(dep)
                frames.append(_Frame(dep, key, iter(self._fan_out.get(dep, ()))))
                entered = True
                break
            if entered:
                continue

            frames.pop()
            visiting.discard(frame.package)
            self._memo[frame.key] = frame.best
            if frames:
                frames[-1].best = max(frames[-1].best, 1 + frame.best)
            else:
                depth = frame.best
        return depth

    def _key(self, package_id: str, visiting: Iterable[str]) -> MemoKey:
        component = self._component.get(package_id)
        if component is None:
            return package_id, frozenset()
        return package_id, component.intersection(visiting)


def classify_units(package_ids: Iterable[str], deployable_patterns: Iterable[str]) -> Dict[str, UnitClass]:
    """Deployable if the package id matches any glob pattern, library otherwise."""
    patterns = list(deployable_patterns)
    return {
        pid: UnitClass.DEPLOYABLE if any(fnmatch(pid, pat) for pat in patterns) else UnitClass.LIBRARY
        for pid in package_ids
    }


def analyze_depth(
    packages: PackageSet,
    unit_classes: Optional[Mapping[str, UnitClass]] = None,
    deployable_max_depth: int = 8,
    library_max_depth: int = 5,
) -> DepthResult:
    """Depth of every package and the threshold violations.

    Args:
        packages: Grouped packages with their fan-out relation
        unit_classes: package id -> class; unlisted packages are libraries
        deployable_max_depth: Limit for deployable units
        library_max_depth: Limit for library units
    """
    calculator = DepthCalculator({p.id: p.fan_out for p in packages})
    classes = unit_classes or {}
    limits = {
        UnitClass.DEPLOYABLE: deployable_max_depth,
        UnitClass.LIBRARY: library_max_depth,
    }

    depths: Dict[str, int] = {}
    violations: list[DepthViolation] = []
    for package in packages:
        depth = calculator.max_depth(package.id)
        depths[package.id] = depth
        unit_class = classes.get(package.id, UnitClass.LIBRARY)
        if depth > limits[unit_class]:
            violations.append(
                DepthViolation(
                    package=package.id,
                    depth=depth,
                    limit=limits[unit_class],
                    unit_class=unit_class,
                )
            )

    max_depth = max(depths.values(), default=0)
    logger.debug(f"Max package depth {max_depth}, {len(violations)} over threshold")
    return DepthResult(depths=depths, max_depth=max_depth, violations=tuple(violations))
