"""Architecture analysis models.

Every analyzer writes only its own result type; ``AnalysisReport`` is the
assembled, output-only view of one run.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class CycleMode(Enum):
    """How the cycle detector decides which edges are circular."""

    FLAGGED = "flagged"  # trust the producer's `circular` edge flags
    SCC = "scc"  # recompute strongly connected components


class UnitClass(Enum):
    """Depth threshold class of a package."""

    DEPLOYABLE = "deployable"
    LIBRARY = "library"


STATUS_OK = "ok"
STATUS_WARNING = "warning"  # cohesion split candidate
STATUS_FAIL = "fail"  # depth over its class threshold
STATUS_ERROR = "error"  # metric could not be computed for this package

_STATUS_RANK = {STATUS_OK: 0, STATUS_WARNING: 1, STATUS_FAIL: 2, STATUS_ERROR: 3}


def worst_status(*statuses: str) -> str:
    return max(statuses, key=lambda s: _STATUS_RANK[s], default=STATUS_OK)


@dataclass(frozen=True)
class CouplingMetrics:
    """Fan-in / fan-out of one package."""

    package: str
    fan_in: int  # distinct packages depending on this one
    fan_out: int  # distinct packages this one depends on
    instability: float  # fan_out / (fan_in + fan_out), 0 when isolated


@dataclass(frozen=True)
class CycleGroup:
    """A strongly connected component with more than one module."""

    members: tuple[str, ...]
    pairs: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class CycleReport:
    mode: CycleMode
    pairs: tuple[tuple[str, str], ...] = ()
    cycle_count: int = 0
    groups: tuple[CycleGroup, ...] = ()  # SCC mode only

    def exceeds(self, allowed_max: int) -> bool:
        return self.cycle_count > allowed_max

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "cycleCount": self.cycle_count,
            "pairs": [list(p) for p in self.pairs],
            "groups": [list(g.members) for g in self.groups],
        }


@dataclass(frozen=True)
class DepthViolation:
    package: str
    depth: int
    limit: int
    unit_class: UnitClass


@dataclass(frozen=True)
class DepthResult:
    depths: dict[str, int] = field(default_factory=dict)
    max_depth: int = 0
    violations: tuple[DepthViolation, ...] = ()


@dataclass(frozen=True)
class CohesionResult:
    """Export clustering of one package.

    ``cluster_count`` is 0 for skipped packages (fewer than two exports)
    and for packages whose closure could not be computed (``error`` set).
    """

    package: str
    exports: tuple[str, ...] = ()
    clusters: tuple[tuple[str, ...], ...] = ()
    skipped: bool = False
    error: Optional[str] = None

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    @property
    def is_cohesive(self) -> bool:
        return self.error is None and self.cluster_count <= 1

    @property
    def is_split_candidate(self) -> bool:
        return self.error is None and self.cluster_count > 1


@dataclass(frozen=True)
class MetricReport:
    """Per-package output row."""

    package: str
    fan_in: int
    fan_out: int
    instability: float
    depth: int
    cluster_count: int
    status: str
    clusters: tuple[tuple[str, ...], ...] = ()
    unit_class: str = UnitClass.LIBRARY.value
    detail: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["clusters"] = [list(c) for c in self.clusters]
        return data


@dataclass(frozen=True)
class Failure:
    """A hard failure with the offending entity and how to fix it."""

    kind: str  # "cycle" | "depth"
    entity: str
    reason: str
    remediation: str


@dataclass
class AnalysisReport:
    """Combined result of one analysis run."""

    packages: list[MetricReport] = field(default_factory=list)
    cycles: Optional[CycleReport] = None
    max_depth: int = 0
    depth_violations: list[DepthViolation] = field(default_factory=list)
    cohesion: list[CohesionResult] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)
    ungrouped_modules: int = 0
    failures: list[Failure] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def split_candidates(self) -> list[CohesionResult]:
        return [c for c in self.cohesion if c.is_split_candidate]

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "packages": [p.to_dict() for p in self.packages],
            "cycles": self.cycles.to_dict() if self.cycles else None,
            "maxDepth": self.max_depth,
            "depthViolations": [
                {
                    "package": v.package,
                    "depth": v.depth,
                    "limit": v.limit,
                    "unitClass": v.unit_class.value,
                }
                for v in self.depth_violations
            ],
            "orphans": list(self.orphans),
            "ungroupedModules": self.ungrouped_modules,
            "failures": [asdict(f) for f in self.failures],
        }
