"""Capture command."""

from pathlib import Path
from typing import Optional

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
from ..exceptions import ArchgateError
from ..ratchet import engine


@app.command()
def capture(
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
    """Snapshot current per-file counts as the baseline."""
    try:
        cfg = resolve_config(config, verbose, quiet, cycle_mode=cycle_mode)
        store = baseline_store(cfg, baseline)
        with store.lock():
            current = current_counts(cfg, graph, complexity, counts)
            captured = engine.capture(current, commit_ref=commit_ref)
            store.save(captured)
    except ArchgateError as e:
        fail(e)

    emit({"command": "capture", "baseline": str(store.path), "totals": dict(captured.totals)})
    totals = ", ".join(f"{m}={t}" for m, t in captured.totals.items()) or "no tracked counts"
    console.print(f"[green]Baseline captured[/green] at {store.path} ({totals})")
