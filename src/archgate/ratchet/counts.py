"""Collection of the per-file counts the ratchet tracks.

Built-in metrics:
    circular_deps  outgoing circular dependency pairs per module
    complexity     flagged-complexity functions per file (external table)

Any other metric comes from an extra ``{metric: {file: count}}`` document,
e.g. violation counts per lint rule produced by an external linter.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Union

from ..architecture.cycles import cycle_counts_by_module
from ..architecture.models import CycleReport
from ..exceptions import MalformedInputError
from ..temporal.models import ComplexityRecord
from ..temporal.tables import parse_count_table

CIRCULAR_DEPS = "circular_deps"
COMPLEXITY = "complexity"


def collect_counts(
    cycles: Optional[CycleReport] = None,
    complexity: Optional[Iterable[ComplexityRecord]] = None,
    extra: Optional[Mapping[str, Mapping[str, int]]] = None,
    tracked_metrics: Sequence[str] = (),
) -> Dict[str, Dict[str, int]]:
    """Merge every available source into ``{metric: {file: count}}``.

    Zero counts are dropped. When ``tracked_metrics`` is non-empty only
    those metrics are returned.
    """
    counts: Dict[str, Dict[str, int]] = {}
    if cycles is not None:
        counts[CIRCULAR_DEPS] = cycle_counts_by_module(cycles)
    if complexity is not None:
        table: Dict[str, int] = {}
        for record in complexity:
            table[record.file_path] = table.get(record.file_path, 0) + record.complex_count
        counts[COMPLEXITY] = table
    for metric, files in (extra or {}).items():
        merged = counts.setdefault(metric, {})
        for file_path, n in files.items():
            merged[file_path] = merged.get(file_path, 0) + n

    if tracked_metrics:
        counts = {m: f for m, f in counts.items() if m in tracked_metrics}
    return {m: {f: n for f, n in files.items() if n > 0} for m, files in counts.items()}


def load_counts_file(path: Union[str, Path]) -> Dict[str, Dict[str, int]]:
    """Read an extra ``{metric: {file: count}}`` document."""
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MalformedInputError("counts file not found", entity=str(p))
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"counts file is not valid JSON: {e}", entity=str(p))
    if not isinstance(raw, dict):
        raise MalformedInputError("counts file must map metric names to tables", entity=str(p))
    return {
        str(metric): parse_count_table(table, "count", f"{p}:{metric}")
        for metric, table in raw.items()
    }
