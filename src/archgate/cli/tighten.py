"""Tighten command."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import (
    BASELINE_OPTION,
    CONFIG_OPTION,
    QUIET_OPTION,
    VERBOSE_OPTION,
    baseline_store,
    console,
    emit,
    fail,
    resolve_config,
)
from ..exceptions import ArchgateError, BaselineMissingError
from ..ratchet import engine


@app.command()
def tighten(
    amount: int = typer.Argument(..., min=0, help="Subtract this from every per-file count"),
    baseline: Optional[Path] = BASELINE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Lower every baseline count by AMOUNT (floored at 0, zeros pruned)."""
    try:
        cfg = resolve_config(config, verbose, quiet)
        store = baseline_store(cfg, baseline)
        with store.lock():
            current = store.load()
            if current is None:
                raise BaselineMissingError("tighten", store.path)
            tightened = engine.tighten(current, amount)
            store.save(tightened)
    except ArchgateError as e:
        fail(e)

    emit(
        {
            "command": "tighten",
            "amount": amount,
            "baseline": str(store.path),
            "before": dict(current.totals),
            "after": dict(tightened.totals),
        }
    )
    for metric, total in tightened.totals.items():
        console.print(f"  {metric}: {current.totals.get(metric, 0)} -> {total}")
    console.print(f"[green]Baseline tightened by {amount}[/green]")
