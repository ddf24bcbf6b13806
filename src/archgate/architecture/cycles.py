"""Circular dependency detection at module level.

Two modes, chosen explicitly by the caller:

- ``FLAGGED`` collects the ``(from, to)`` pairs the graph producer marked
  circular. Cheap, but only as trustworthy as the producer.
- ``SCC`` ignores the flags and recomputes strongly connected components
  over the internal adjacency; each component of two or more modules is one
  cycle.

Ungrouped modules take part in both modes.
"""

from typing import Union

from ..graph.algorithms import internal_edges, tarjan_scc
from ..graph.models import Graph
from ..logging_config import get_logger
from .models import CycleGroup, CycleMode, CycleReport

logger = get_logger(__name__)


def detect_cycles(graph: Graph, mode: Union[CycleMode, str]) -> CycleReport:
    """Detect circular dependencies using the selected mode.

    Args:
        graph: Loaded module graph
        mode: ``CycleMode`` or its string value; there is no default

    Returns:
        CycleReport with deduplicated pairs and the cycle count
    """
    mode = CycleMode(mode)
    if mode is CycleMode.FLAGGED:
        report = collect_flagged_cycles(graph)
    else:
        report = compute_scc_cycles(graph)
    logger.debug(f"Cycle detection ({mode.value}): {report.cycle_count} cycles")
    return report


def collect_flagged_cycles(graph: Graph) -> CycleReport:
    pairs = sorted(
        {
            (source, edge.resolved_target)
            for source, edge in graph.edges()
            if edge.is_circular and not edge.is_external
        }
    )
    return CycleReport(mode=CycleMode.FLAGGED, pairs=tuple(pairs), cycle_count=len(pairs))


def compute_scc_cycles(graph: Graph) -> CycleReport:
    groups: list[CycleGroup] = []
    for component in tarjan_scc(graph.adjacency, graph.ids):
        if len(component) < 2:
            continue
        groups.append(
            CycleGroup(
                members=tuple(component),
                pairs=tuple(internal_edges(graph.adjacency, component)),
            )
        )
    groups.sort(key=lambda g: g.members)
    pairs = sorted(p for g in groups for p in g.pairs)
    return CycleReport(
        mode=CycleMode.SCC,
        pairs=tuple(pairs),
        cycle_count=len(groups),
        groups=tuple(groups),
    )


def cycle_counts_by_module(report: CycleReport) -> dict[str, int]:
    """Number of outgoing cycle pairs per module (per-file ratchet metric)."""
    counts: dict[str, int] = {}
    for source, _target in report.pairs:
        counts[source] = counts.get(source, 0) + 1
    return counts
