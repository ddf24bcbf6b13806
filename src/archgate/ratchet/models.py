"""Ratchet data models.

A Baseline is a value: every engine operation takes one and returns a new
one. Regressions are data returned by ``check``, never exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

BASELINE_VERSION = 1

# metric -> file path -> count
MetricCounts = Mapping[str, Mapping[str, int]]


class RatchetState(Enum):
    UNINITIALIZED = "uninitialized"
    CAPTURED = "captured"


def prune_counts(counts: MetricCounts) -> dict[str, dict[str, int]]:
    """Copy ``counts`` dropping zero entries; metric keys are kept even when empty."""
    return {
        metric: {path: int(n) for path, n in sorted(files.items()) if n > 0}
        for metric, files in sorted(counts.items())
    }


@dataclass(frozen=True)
class Baseline:
    """Committed per-file metric counts.

    Build through ``Baseline.create`` so zero entries are pruned and totals
    always match the per-file maps.
    """

    timestamp: str
    commit_ref: str
    metrics: Mapping[str, Mapping[str, int]]
    totals: Mapping[str, int]

    @classmethod
    def create(cls, metrics: MetricCounts, timestamp: str, commit_ref: str) -> Baseline:
        pruned = prune_counts(metrics)
        return cls(
            timestamp=timestamp,
            commit_ref=commit_ref,
            metrics=MappingProxyType({m: MappingProxyType(f) for m, f in pruned.items()}),
            totals=MappingProxyType({m: sum(f.values()) for m, f in pruned.items()}),
        )

    @property
    def tracked_metrics(self) -> list[str]:
        return sorted(self.metrics)

    def count(self, metric: str, file_path: str) -> int:
        return self.metrics.get(metric, {}).get(file_path, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": BASELINE_VERSION,
            "timestamp": self.timestamp,
            "commit_ref": self.commit_ref,
            "metrics": {m: dict(f) for m, f in self.metrics.items()},
            "totals": dict(self.totals),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Baseline:
        """Parse a baseline document; raises ValueError/KeyError/TypeError on bad shape."""
        version = data.get("version", BASELINE_VERSION)
        if version != BASELINE_VERSION:
            raise ValueError(f"unsupported baseline version {version!r}")
        metrics = data["metrics"]
        if not isinstance(metrics, dict):
            raise TypeError("'metrics' must be an object")
        for metric, files in metrics.items():
            if not isinstance(files, dict):
                raise TypeError(f"metric {metric!r} must map files to counts")
            for path, n in files.items():
                if not isinstance(n, int) or isinstance(n, bool) or n < 0:
                    raise ValueError(f"{metric}/{path}: count must be a non-negative integer")
        return cls.create(metrics, timestamp=str(data["timestamp"]), commit_ref=str(data["commit_ref"]))


@dataclass(frozen=True)
class CountChange:
    """One file+metric whose count moved against the baseline."""

    file: str
    metric: str
    old: int
    new: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "metric": self.metric, "old": self.old, "new": self.new}


class Regression(CountChange):
    """Current count above the baseline: a hard failure."""


class Improvement(CountChange):
    """Current count below the baseline: logged, never auto-applied."""


@dataclass(frozen=True)
class CheckResult:
    state: RatchetState
    regressions: tuple[Regression, ...] = ()
    improvements: tuple[Improvement, ...] = ()
    untracked_metrics: tuple[str, ...] = ()
    recommendation: Optional[str] = None

    @property
    def passed(self) -> bool:
        return not self.regressions

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "passed": self.passed,
            "regressions": [r.to_dict() for r in self.regressions],
            "improvements": [i.to_dict() for i in self.improvements],
            "untrackedMetrics": list(self.untracked_metrics),
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class RecaptureResult:
    baseline: Baseline
    check: CheckResult
    applied: bool = field(default=False)
