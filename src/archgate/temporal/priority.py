"""Churn x complexity priority ranking.

Only files that both change often and carry flagged complexity are scored;
each factor is normalized by its observed maximum, and the product ranks
where refactoring pays off first. Advisory only, never a gate.
"""

from typing import Dict, Iterable, List, Optional

import numpy as np

from ..logging_config import get_logger
from .models import ChurnRecord, ComplexityRecord, PriorityEntry

logger = get_logger(__name__)


def normalize_by_max(values: np.ndarray) -> np.ndarray:
    """Divide by the maximum; an all-zero (or empty) vector maps to zeros."""
    if values.size == 0:
        return values.astype(float)
    peak = float(values.max())
    if peak <= 0:
        return np.zeros(values.shape, dtype=float)
    return values.astype(float) / peak


def score_priorities(
    churn: Iterable[ChurnRecord],
    complexity: Iterable[ComplexityRecord],
    limit: Optional[int] = None,
) -> List[PriorityEntry]:
    """Rank files present in both tables by normalized churn x complexity.

    Args:
        churn: Change counts per file
        complexity: Flagged-function counts per file
        limit: Keep only the top N entries (None or 0 = all)

    Returns:
        Entries sorted by descending score, ties by path
    """
    churn_by_file: Dict[str, int] = {}
    for record in churn:
        churn_by_file[record.file_path] = churn_by_file.get(record.file_path, 0) + record.change_count
    complexity_by_file: Dict[str, int] = {}
    for record in complexity:
        complexity_by_file[record.file_path] = (
            complexity_by_file.get(record.file_path, 0) + record.complex_count
        )

    files = sorted(
        f
        for f in churn_by_file.keys() & complexity_by_file.keys()
        if churn_by_file[f] > 0 and complexity_by_file[f] > 0
    )
    if not files:
        logger.info("No file has both churn and flagged complexity")
        return []

    churn_vec = np.array([churn_by_file[f] for f in files], dtype=np.int64)
    complexity_vec = np.array([complexity_by_file[f] for f in files], dtype=np.int64)
    scores = normalize_by_max(churn_vec) * normalize_by_max(complexity_vec)

    entries = [
        PriorityEntry(
            file_path=f,
            churn=int(churn_vec[i]),
            complexity=int(complexity_vec[i]),
            score=float(scores[i]),
        )
        for i, f in enumerate(files)
    ]
    entries.sort(key=lambda e: (-e.score, e.file_path))

    if limit:
        entries = entries[:limit]
    return entries
