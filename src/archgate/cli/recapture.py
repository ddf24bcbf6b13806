"""Recapture command: adopt improvements into the baseline."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import (
    BASELINE_OPTION,
    COMMIT_REF_OPTION,
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
from .check import print_check_summary
from ..exceptions import ArchgateError, BaselineMissingError
from ..ratchet import engine


@app.command()
def recapture(
    graph: Path = GRAPH_OPTION,
    complexity: Optional[Path] = COMPLEXITY_OPTION,
    counts: Optional[Path] = COUNTS_OPTION,
    baseline: Optional[Path] = BASELINE_OPTION,
    cycle_mode: Optional[str] = CYCLE_MODE_OPTION,
    commit_ref: str = COMMIT_REF_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Re-snapshot the baseline after improvements; refused on any regression."""
    try:
        cfg = resolve_config(config, verbose, quiet, cycle_mode=cycle_mode)
        store = baseline_store(cfg, baseline)
        with store.lock():
            previous = store.load()
            if previous is None:
                raise BaselineMissingError("recapture", store.path)
            current = current_counts(cfg, graph, complexity, counts)
            result = engine.recapture(previous, current, commit_ref=commit_ref)
            if result.applied:
                store.save(result.baseline)
    except ArchgateError as e:
        fail(e)

    for regression in result.check.regressions:
        emit({"type": "regression", **regression.to_dict()})
    emit(
        {
            "command": "recapture",
            "applied": result.applied,
            "baseline": str(store.path),
            "totals": dict(result.baseline.totals),
        }
    )

    if not result.applied:
        print_check_summary(result.check)
        console.print("[red]Recapture refused:[/red] fix the regressions first")
        raise typer.Exit(1)
    console.print(f"[green]Baseline recaptured[/green] at {store.path}")
