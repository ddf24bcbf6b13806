"""Baseline ratchet: forbid regressions, allow deliberate tightening."""

from .counts import CIRCULAR_DEPS, COMPLEXITY, collect_counts, load_counts_file
from .engine import capture, check, recapture, state_of, tighten
from .models import (
    Baseline,
    CheckResult,
    Improvement,
    RatchetState,
    RecaptureResult,
    Regression,
)
from .store import BaselineStore

__all__ = [
    "CIRCULAR_DEPS",
    "COMPLEXITY",
    "Baseline",
    "BaselineStore",
    "CheckResult",
    "Improvement",
    "RatchetState",
    "RecaptureResult",
    "Regression",
    "capture",
    "check",
    "collect_counts",
    "load_counts_file",
    "recapture",
    "state_of",
    "tighten",
]
