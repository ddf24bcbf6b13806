"""Architecture analysis: coupling, cycles, depth, export cohesion."""

from .analyzer import ArchitectureAnalyzer
from .models import (
    AnalysisReport,
    CohesionResult,
    CouplingMetrics,
    CycleGroup,
    CycleMode,
    CycleReport,
    DepthResult,
    DepthViolation,
    Failure,
    MetricReport,
    UnitClass,
)

__all__ = [
    "AnalysisReport",
    "ArchitectureAnalyzer",
    "CohesionResult",
    "CouplingMetrics",
    "CycleGroup",
    "CycleMode",
    "CycleReport",
    "DepthResult",
    "DepthViolation",
    "Failure",
    "MetricReport",
    "UnitClass",
]
