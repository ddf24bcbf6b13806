"""ArchitectureAnalyzer: runs the graph analyzers and assembles the report.

Orchestrates:
1. Coupling (fan-in / fan-out / instability)
2. Cycle detection
3. Depth
4. Export cohesion

The four read the same immutable graph and package set and each returns
its own result object, so they run concurrently without locking.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..graph.models import Graph, PackageSet
from ..logging_config import get_logger
from .cohesion import analyze_cohesion
from .coupling import analyze_coupling
from .cycles import detect_cycles
from .depth import analyze_depth
from .models import (
    STATUS_ERROR,
    STATUS_FAIL,
    STATUS_OK,
    STATUS_WARNING,
    AnalysisReport,
    CohesionResult,
    CouplingMetrics,
    CycleMode,
    CycleReport,
    DepthResult,
    Failure,
    MetricReport,
    UnitClass,
    worst_status,
)

logger = get_logger(__name__)


class ArchitectureAnalyzer:
    """Computes every structural metric for one graph."""

    def __init__(
        self,
        cycle_mode: Union[CycleMode, str],
        allowed_cycles: int = 0,
        deployable_max_depth: int = 8,
        library_max_depth: int = 5,
        workers: Optional[int] = None,
    ):
        self.cycle_mode = CycleMode(cycle_mode)
        self.allowed_cycles = allowed_cycles
        self.deployable_max_depth = deployable_max_depth
        self.library_max_depth = library_max_depth
        self.workers = workers

    def analyze(
        self,
        graph: Graph,
        packages: PackageSet,
        unit_classes: Optional[Mapping[str, UnitClass]] = None,
    ) -> AnalysisReport:
        tasks: Dict[str, Callable[[], Any]] = {
            "coupling": lambda: analyze_coupling(packages),
            "cycles": lambda: detect_cycles(graph, self.cycle_mode),
            "depth": lambda: analyze_depth(
                packages,
                unit_classes,
                deployable_max_depth=self.deployable_max_depth,
                library_max_depth=self.library_max_depth,
            ),
            "cohesion": lambda: analyze_cohesion(graph, packages),
        }
        results = self._run(tasks)

        return self._assemble(
            graph,
            packages,
            unit_classes or {},
            coupling=results["coupling"],
            cycles=results["cycles"],
            depth=results["depth"],
            cohesion=results["cohesion"],
        )

    def _run(self, tasks: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        if self.workers == 1:
            return {name: task() for name, task in tasks.items()}

        max_workers = self.workers or len(tasks)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            # Any analyzer exception propagates: a partial report is never returned
            return {name: future.result() for name, future in futures.items()}

    def _assemble(
        self,
        graph: Graph,
        packages: PackageSet,
        unit_classes: Mapping[str, UnitClass],
        coupling: Dict[str, CouplingMetrics],
        cycles: CycleReport,
        depth: DepthResult,
        cohesion: Dict[str, CohesionResult],
    ) -> AnalysisReport:
        violating = {v.package: v for v in depth.violations}
        rows: list[MetricReport] = []
        for package in packages:
            c = coupling[package.id]
            coh = cohesion[package.id]
            statuses = [STATUS_OK]
            detail: Optional[str] = None
            if coh.is_split_candidate:
                statuses.append(STATUS_WARNING)
                detail = f"{coh.cluster_count} unrelated export clusters; consider splitting"
            if package.id in violating:
                v = violating[package.id]
                statuses.append(STATUS_FAIL)
                detail = f"depth {v.depth} exceeds {v.unit_class.value} limit {v.limit}"
            if coh.error:
                statuses.append(STATUS_ERROR)
                detail = coh.error
            rows.append(
                MetricReport(
                    package=package.id,
                    fan_in=c.fan_in,
                    fan_out=c.fan_out,
                    instability=c.instability,
                    depth=depth.depths.get(package.id, 0),
                    cluster_count=coh.cluster_count,
                    status=worst_status(*statuses),
                    clusters=coh.clusters,
                    unit_class=unit_classes.get(package.id, UnitClass.LIBRARY).value,
                    detail=detail,
                )
            )

        failures: list[Failure] = []
        if cycles.exceeds(self.allowed_cycles):
            for source, target in cycles.pairs:
                failures.append(
                    Failure(
                        kind="cycle",
                        entity=f"{source} -> {target}",
                        reason=f"circular dependency ({cycles.cycle_count} cycles, {self.allowed_cycles} allowed)",
                        remediation="break the cycle by removing or inverting this edge",
                    )
                )
            logger.warning(
                f"{cycles.cycle_count} circular dependencies exceed the allowed {self.allowed_cycles}"
            )
        for v in depth.violations:
            failures.append(
                Failure(
                    kind="depth",
                    entity=v.package,
                    reason=f"dependency depth {v.depth} exceeds {v.unit_class.value} limit {v.limit}",
                    remediation="flatten the dependency chain below this package",
                )
            )

        return AnalysisReport(
            packages=rows,
            cycles=cycles,
            max_depth=depth.max_depth,
            depth_violations=list(depth.violations),
            cohesion=[cohesion[p.id] for p in packages],
            orphans=graph.orphans,
            ungrouped_modules=len(packages.ungrouped),
            failures=failures,
        )
