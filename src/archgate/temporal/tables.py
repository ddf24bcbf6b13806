"""Loading of the externally produced churn and complexity tables.

Both tables are keyed by file path and accepted either as a list of
records (``[{"filePath": ..., "changeCount": ...}]``) or as a flat
``{path: count}`` object. Duplicate paths are summed.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from ..exceptions import MalformedInputError
from .models import ChurnRecord, ComplexityRecord


def load_churn_table(path: Union[str, Path]) -> List[ChurnRecord]:
    counts = parse_count_table(_read_json(path), "changeCount", str(path))
    return [ChurnRecord(file_path=f, change_count=n) for f, n in sorted(counts.items())]


def load_complexity_table(path: Union[str, Path]) -> List[ComplexityRecord]:
    counts = parse_count_table(_read_json(path), "complexCount", str(path))
    return [ComplexityRecord(file_path=f, complex_count=n) for f, n in sorted(counts.items())]


def parse_count_table(raw: Any, count_key: str, source: str = "table") -> Dict[str, int]:
    """Normalise a record list or flat mapping into ``{path: count}``."""
    pairs: list[tuple[Any, Any]]
    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for index, record in enumerate(raw):
            if not isinstance(record, dict) or "filePath" not in record or count_key not in record:
                raise MalformedInputError(
                    f"record #{index} needs 'filePath' and '{count_key}'", entity=source
                )
            pairs.append((record["filePath"], record[count_key]))
    else:
        raise MalformedInputError("count table must be a list of records or an object", entity=source)

    counts: Dict[str, int] = {}
    for file_path, count in pairs:
        if not isinstance(file_path, str) or not file_path:
            raise MalformedInputError("file paths must be non-empty strings", entity=source)
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise MalformedInputError(
                f"count for {file_path} must be a non-negative integer, got {count!r}",
                entity=source,
            )
        counts[file_path] = counts.get(file_path, 0) + count
    return counts


def _read_json(path: Union[str, Path]) -> Any:
    p = Path(path)
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MalformedInputError("table file not found", entity=str(p))
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"table is not valid JSON: {e}", entity=str(p))
