"""Package coupling: fan-in, fan-out, instability.

Fan-in is never counted separately from fan-out: both come from the single
package relation built during grouping (fan-in is its inverse), so for every
pair ``Q in fan_out(P)`` iff ``P in fan_in(Q)``.
"""

from typing import Dict

from ..graph.models import Package, PackageSet
from ..logging_config import get_logger
from .models import CouplingMetrics

logger = get_logger(__name__)


def compute_instability(fan_in: int, fan_out: int) -> float:
    """Compute instability I = fan_out / (fan_in + fan_out).

    An isolated package (both zero) is maximally stable by convention.

    Returns:
        Instability in [0, 1]
    """
    total = fan_in + fan_out
    if total == 0:
        return 0.0
    return fan_out / total


def compute_coupling(package: Package) -> CouplingMetrics:
    fan_in = len(package.fan_in)
    fan_out = len(package.fan_out)
    return CouplingMetrics(
        package=package.id,
        fan_in=fan_in,
        fan_out=fan_out,
        instability=compute_instability(fan_in, fan_out),
    )


def analyze_coupling(packages: PackageSet) -> Dict[str, CouplingMetrics]:
    """Coupling metrics for every package, keyed by package id."""
    result = {p.id: compute_coupling(p) for p in packages}
    logger.debug(f"Coupling computed for {len(result)} packages")
    return result
