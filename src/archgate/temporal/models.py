"""Data models for churn / complexity prioritisation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChurnRecord:
    file_path: str
    change_count: int  # changes within the caller's time window


@dataclass(frozen=True)
class ComplexityRecord:
    file_path: str
    complex_count: int  # functions over the external analyzer's complexity threshold


@dataclass(frozen=True)
class PriorityEntry:
    file_path: str
    churn: int
    complexity: int
    score: float  # normalized churn * normalized complexity, in [0, 1]

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "churn": self.churn,
            "complexity": self.complexity,
            "score": round(self.score, 6),
        }
