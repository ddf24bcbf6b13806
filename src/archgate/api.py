"""Public API for archgate.

Example:
    >>> from archgate import analyze, load_graph_file
    >>> graph = load_graph_file("deps.json")
    >>> report = analyze(graph, cycle_mode="scc")
    >>> report.passed
    True
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from .architecture import AnalysisReport, ArchitectureAnalyzer, UnitClass
from .architecture.depth import classify_units
from .config import ArchgateConfig, load_config
from .graph import Graph, PackageSet, group_into_packages, load_graph_file, prefix_grouping
from .logging_config import get_logger

logger = get_logger(__name__)


def build_packages(graph: Graph, config: ArchgateConfig) -> PackageSet:
    """Group the graph's modules using the configured prefix rule."""
    return group_into_packages(
        graph,
        prefix_grouping(config.package_depth, config.package_roots),
        entry_point_names=config.entry_point_names,
    )


def analyze(
    graph: Union[Graph, str, Path],
    config: Optional[ArchgateConfig] = None,
    unit_classes: Optional[Mapping[str, UnitClass]] = None,
    **overrides,
) -> AnalysisReport:
    """Run every structural analyzer over a module graph.

    Args:
        graph: Loaded Graph, or a path to the producer's JSON document
        config: Explicit configuration (default: discovered via load_config)
        unit_classes: package id -> deployable/library; merged over the
            classes derived from ``config.deployable_packages``
        **overrides: Config overrides when ``config`` is not given,
            e.g. ``cycle_mode="scc"``

    Returns:
        AnalysisReport; ``report.passed`` is False on any hard failure

    Raises:
        MalformedInputError: if the graph document is inconsistent
        InvalidConfigError: if no cycle mode was chosen
    """
    if config is None:
        config = load_config(**overrides)
    cycle_mode = config.require_cycle_mode()

    if not isinstance(graph, Graph):
        graph = load_graph_file(graph)

    packages = build_packages(graph, config)
    classes = classify_units((p.id for p in packages), config.deployable_packages)
    classes.update(unit_classes or {})

    analyzer = ArchitectureAnalyzer(
        cycle_mode=cycle_mode,
        allowed_cycles=config.allowed_cycles,
        deployable_max_depth=config.deployable_max_depth,
        library_max_depth=config.library_max_depth,
        workers=config.workers,
    )
    report = analyzer.analyze(graph, packages, classes)
    logger.info(
        f"Analyzed {len(packages)} packages: {len(report.failures)} failures, "
        f"{len(report.split_candidates)} split candidates"
    )
    return report
