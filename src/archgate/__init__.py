"""
archgate - architecture metrics and non-regression gate

Computes structural health signals over a pre-resolved module dependency
graph (coupling, cycles, depth, export cohesion, churn-weighted complexity)
and enforces a ratchet against a committed baseline.
"""

__version__ = "0.1.0"

from .api import analyze
from .graph import load, load_graph_file
from .ratchet import Baseline, BaselineStore, CheckResult

__all__ = [
    "analyze",
    "load",
    "load_graph_file",
    "Baseline",
    "BaselineStore",
    "CheckResult",
]
