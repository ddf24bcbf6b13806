"""Tests for churn x complexity prioritisation."""

import numpy as np
import pytest

from archgate.temporal import ChurnRecord, ComplexityRecord, score_priorities
from archgate.temporal.priority import normalize_by_max


def _churn(**counts):
    return [ChurnRecord(file_path=f"{k}.ts", change_count=v) for k, v in counts.items()]


def _complexity(**counts):
    return [ComplexityRecord(file_path=f"{k}.ts", complex_count=v) for k, v in counts.items()]


class TestNormalizeByMax:
    def test_scales_to_unit(self):
        assert np.allclose(normalize_by_max(np.array([2, 4, 1])), [0.5, 1.0, 0.25])

    def test_all_zero(self):
        assert np.array_equal(normalize_by_max(np.array([0, 0])), [0.0, 0.0])

    def test_empty(self):
        assert normalize_by_max(np.array([], dtype=np.int64)).size == 0


class TestScorePriorities:
    """Test ranking by normalized churn x normalized complexity."""

    def test_ranking(self):
        entries = score_priorities(_churn(a=10, b=5, c=10), _complexity(a=2, b=4, c=4))
        assert [e.file_path for e in entries] == ["c.ts", "a.ts", "b.ts"]
        assert entries[0].score == pytest.approx(1.0)
        assert entries[1].score == pytest.approx(0.5)
        assert entries[2].score == pytest.approx(0.5)

    def test_ties_sorted_by_path(self):
        entries = score_priorities(_churn(b=1, a=1), _complexity(a=1, b=1))
        assert [e.file_path for e in entries] == ["a.ts", "b.ts"]

    def test_only_files_in_both_tables(self):
        entries = score_priorities(_churn(a=3, only_churn=9), _complexity(a=1, only_complex=7))
        assert [e.file_path for e in entries] == ["a.ts"]

    def test_zero_counts_excluded(self):
        entries = score_priorities(_churn(a=0, b=2), _complexity(a=5, b=1))
        assert [e.file_path for e in entries] == ["b.ts"]

    def test_scores_in_unit_interval(self):
        entries = score_priorities(_churn(a=7, b=3, c=1), _complexity(a=1, b=9, c=2))
        assert all(0.0 < e.score <= 1.0 for e in entries)

    def test_limit(self):
        entries = score_priorities(_churn(a=1, b=2, c=3), _complexity(a=1, b=1, c=1), limit=2)
        assert [e.file_path for e in entries] == ["c.ts", "b.ts"]

    def test_empty(self):
        assert score_priorities([], []) == []

    def test_duplicates_summed(self):
        churn = [ChurnRecord("a.ts", 1), ChurnRecord("a.ts", 2)]
        entries = score_priorities(churn, _complexity(a=1))
        assert entries[0].churn == 3

    def test_to_dict(self):
        entry = score_priorities(_churn(a=1), _complexity(a=1))[0]
        assert entry.to_dict() == {"filePath": "a.ts", "churn": 1, "complexity": 1, "score": 1.0}
