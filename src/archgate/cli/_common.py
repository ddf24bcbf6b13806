"""Shared CLI helpers.

stdout carries one JSON document per line for machines; everything meant
for humans goes through ``console`` on stderr.
"""

import json
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional

import typer
from rich.console import Console

from ..architecture.cycles import detect_cycles
from ..config import ArchgateConfig, load_config
from ..exceptions import ArchgateError
from ..graph import load_graph_file
from ..logging_config import setup_logging
from ..ratchet import BaselineStore, collect_counts, load_counts_file
from ..temporal import load_complexity_table

console = Console(stderr=True)

GRAPH_OPTION = typer.Option(..., "--graph", "-g", help="Dependency graph JSON from the extraction tool")
COMPLEXITY_OPTION = typer.Option(None, "--complexity", help="Per-file complexity table (JSON)")
COUNTS_OPTION = typer.Option(None, "--counts", help="Extra {metric: {file: count}} document (JSON)")
BASELINE_OPTION = typer.Option(None, "--baseline", "-b", help="Baseline file (default from config)")
CYCLE_MODE_OPTION = typer.Option(
    None, "--cycle-mode", help="Cycle detection mode: flagged (trust producer) or scc (recompute)"
)
COMMIT_REF_OPTION = typer.Option(
    "unknown", "--commit-ref", envvar="ARCHGATE_COMMIT_REF", help="Commit the baseline describes"
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Configuration file (TOML)", exists=True, file_okay=True, dir_okay=False
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr")
QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Only log errors")


def emit(data: Dict[str, Any]) -> None:
    """Write one machine-readable diagnostic line to stdout."""
    typer.echo(json.dumps(data, sort_keys=True))


def fail(error: ArchgateError) -> NoReturn:
    """Report an error on both channels and exit 1."""
    emit(
        {
            "error": type(error).__name__,
            "message": error.message,
            "details": error.details,
        }
    )
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
    **overrides: Any,
) -> ArchgateConfig:
    """Set up logging and build settings from CLI options."""
    setup_logging(verbose=verbose, quiet=quiet)
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def baseline_store(cfg: ArchgateConfig, baseline: Optional[Path]) -> BaselineStore:
    return BaselineStore(baseline if baseline is not None else Path(cfg.baseline_path))


def current_counts(
    cfg: ArchgateConfig,
    graph: Path,
    complexity: Optional[Path],
    counts: Optional[Path],
) -> Dict[str, Dict[str, int]]:
    """Load the inputs of one run and collect the ratchet's per-file counts."""
    loaded = load_graph_file(graph)
    cycles = detect_cycles(loaded, cfg.require_cycle_mode())
    return collect_counts(
        cycles=cycles,
        complexity=load_complexity_table(complexity) if complexity is not None else None,
        extra=load_counts_file(counts) if counts is not None else None,
        tracked_metrics=cfg.tracked_metrics,
    )
