"""Check command: fail on any regression against the baseline."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import (
    BASELINE_OPTION,
    COMPLEXITY_OPTION,
    CONFIG_OPTION,
    COUNTS_OPTION,
    CYCLE_MODE_OPTION,
    GRAPH_OPTION,
    QUIET_OPTION,
    VERBOSE_OPTION,
    baseline_store,
    console,
    current_counts,
    emit,
    fail,
    resolve_config,
)
from ..exceptions import ArchgateError
from ..ratchet import CheckResult, RatchetState, engine


@app.command()
def check(
    graph: Path = GRAPH_OPTION,
    complexity: Optional[Path] = COMPLEXITY_OPTION,
    counts: Optional[Path] = COUNTS_OPTION,
    baseline: Optional[Path] = BASELINE_OPTION,
    cycle_mode: Optional[str] = CYCLE_MODE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Compare current counts with the baseline; exit 1 on any regression."""
    try:
        cfg = resolve_config(config, verbose, quiet, cycle_mode=cycle_mode)
        store = baseline_store(cfg, baseline)
        with store.lock():
            current = current_counts(cfg, graph, complexity, counts)
            result = engine.check(store.load(), current)
    except ArchgateError as e:
        fail(e)

    for regression in result.regressions:
        emit({"type": "regression", **regression.to_dict()})
    for improvement in result.improvements:
        emit({"type": "improvement", **improvement.to_dict()})
    emit({"type": "summary", **result.to_dict()})

    print_check_summary(result)
    if not result.passed:
        raise typer.Exit(1)


def print_check_summary(result: CheckResult) -> None:
    if result.state is RatchetState.UNINITIALIZED:
        console.print(f"[yellow]No baseline.[/yellow] {result.recommendation}")
        return

    if result.regressions:
        console.print(f"[red bold]{len(result.regressions)} regression(s)[/red bold]")
        for r in result.regressions:
            console.print(f"  [red]{r.file}[/red]  {r.metric}: {r.old} -> {r.new}")
    else:
        console.print("[green]No regressions.[/green]")

    if result.improvements:
        console.print(f"[cyan]{len(result.improvements)} improvement(s)[/cyan]")
        for i in result.improvements:
            console.print(f"  {i.file}  {i.metric}: {i.old} -> {i.new}")

    if result.recommendation:
        console.print(f"[dim]{result.recommendation}[/dim]")
