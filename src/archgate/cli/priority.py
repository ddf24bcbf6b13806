"""Priority command: churn x complexity hotspot ranking (advisory)."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from . import app
from ._common import CONFIG_OPTION, QUIET_OPTION, VERBOSE_OPTION, console, emit, fail, resolve_config
from ..exceptions import ArchgateError
from ..temporal import load_churn_table, load_complexity_table, score_priorities


@app.command()
def priority(
    churn: Path = typer.Option(..., "--churn", help="Per-file change counts (JSON)"),
    complexity: Path = typer.Option(..., "--complexity", help="Per-file complexity counts (JSON)"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0, help="Show top N (0 = all)"),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Rank files that both change often and are hard to change."""
    try:
        cfg = resolve_config(config, verbose, quiet, priority_limit=limit)
        entries = score_priorities(
            load_churn_table(churn),
            load_complexity_table(complexity),
            limit=cfg.priority_limit,
        )
    except ArchgateError as e:
        fail(e)

    emit({"priorities": [entry.to_dict() for entry in entries]})

    if not entries:
        console.print("[yellow]No file has both churn and flagged complexity.[/yellow]")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("#", justify="right")
    table.add_column("File", min_width=30)
    table.add_column("Churn", justify="right")
    table.add_column("Complex", justify="right")
    table.add_column("Score", justify="right")
    for rank, entry in enumerate(entries, start=1):
        table.add_row(str(rank), entry.file_path, str(entry.churn), str(entry.complexity), f"{entry.score:.3f}")
    console.print(table)
