"""Churn-weighted complexity prioritisation."""

from .models import ChurnRecord, ComplexityRecord, PriorityEntry
from .priority import score_priorities
from .tables import load_churn_table, load_complexity_table

__all__ = [
    "ChurnRecord",
    "ComplexityRecord",
    "PriorityEntry",
    "load_churn_table",
    "load_complexity_table",
    "score_priorities",
]
