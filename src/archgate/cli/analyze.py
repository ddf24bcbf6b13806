"""Analyze command: full structural report with hard-failure gate."""

from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.table import Table

from . import app
from ._common import (
    COMPLEXITY_OPTION,
    CONFIG_OPTION,
    CYCLE_MODE_OPTION,
    GRAPH_OPTION,
    QUIET_OPTION,
    VERBOSE_OPTION,
    console,
    emit,
    fail,
    resolve_config,
)
from ..api import analyze as run_analysis
from ..architecture import AnalysisReport, UnitClass
from ..exceptions import ArchgateError, InvalidConfigError
from ..temporal import load_churn_table, load_complexity_table, score_priorities

_STATUS_STYLE = {"ok": "green", "warning": "yellow", "fail": "red", "error": "magenta"}


@app.command()
def analyze(
    graph: Path = GRAPH_OPTION,
    cycle_mode: Optional[str] = CYCLE_MODE_OPTION,
    churn: Optional[Path] = typer.Option(None, "--churn", help="Per-file change counts (JSON)"),
    complexity: Optional[Path] = COMPLEXITY_OPTION,
    unit_class: Optional[List[str]] = typer.Option(
        None,
        "--unit-class",
        help="Override a package's depth class, e.g. apps/web=deployable (repeatable)",
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, max=32, help="Analyzer threads"),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Compute coupling, cycles, depth and cohesion; exit 1 on a hard failure."""
    try:
        cfg = resolve_config(config, verbose, quiet, cycle_mode=cycle_mode, workers=workers)
        report = run_analysis(graph, cfg, unit_classes=_parse_unit_classes(unit_class or []))
        priorities = None
        if churn is not None and complexity is not None:
            priorities = score_priorities(
                load_churn_table(churn),
                load_complexity_table(complexity),
                limit=cfg.priority_limit,
            )
    except ArchgateError as e:
        fail(e)

    data = report.to_dict()
    if priorities is not None:
        data["priorities"] = [p.to_dict() for p in priorities]
    emit(data)

    _print_report(report)
    if not report.passed:
        raise typer.Exit(1)


def _parse_unit_classes(values: List[str]) -> Dict[str, UnitClass]:
    classes: Dict[str, UnitClass] = {}
    for value in values:
        package_id, sep, kind = value.partition("=")
        if not sep or not package_id:
            raise InvalidConfigError("unit-class", value, "expected PACKAGE=deployable|library")
        try:
            classes[package_id] = UnitClass(kind)
        except ValueError:
            raise InvalidConfigError("unit-class", value, "class must be deployable or library")
    return classes


def _print_report(report: AnalysisReport) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Package", min_width=24)
    table.add_column("Fan-in", justify="right")
    table.add_column("Fan-out", justify="right")
    table.add_column("Instability", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Clusters", justify="right")
    table.add_column("Status")

    for row in report.packages:
        style = _STATUS_STYLE.get(row.status, "white")
        table.add_row(
            row.package,
            str(row.fan_in),
            str(row.fan_out),
            f"{row.instability:.2f}",
            str(row.depth),
            str(row.cluster_count),
            f"[{style}]{row.status}[/{style}]",
        )
    console.print(table)

    cycles = report.cycles
    if cycles is not None:
        console.print(f"Cycles ({cycles.mode.value}): {cycles.cycle_count}   Max depth: {report.max_depth}")
    if report.orphans:
        console.print(f"[dim]{len(report.orphans)} orphan module(s)[/dim]")

    for candidate in report.split_candidates:
        console.print(f"[yellow]Split candidate[/yellow] {candidate.package}:")
        for cluster in candidate.clusters:
            console.print(f"  - {', '.join(cluster)}")

    if report.passed:
        console.print("[green]Structure gate passed.[/green]")
        return
    console.print(f"[red bold]{len(report.failures)} hard failure(s)[/red bold]")
    for failure in report.failures:
        console.print(f"  [red]{failure.entity}[/red]: {failure.reason}. Fix: {failure.remediation}")
