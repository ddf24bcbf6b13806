"""Tests for churn / complexity table loading."""

import pytest

from archgate.exceptions import MalformedInputError
from archgate.temporal import load_churn_table, load_complexity_table
from archgate.temporal.tables import parse_count_table


class TestParseCountTable:
    def test_record_list(self):
        raw = [{"filePath": "a.ts", "changeCount": 3}, {"filePath": "a.ts", "changeCount": 1}]
        assert parse_count_table(raw, "changeCount") == {"a.ts": 4}

    def test_flat_mapping(self):
        assert parse_count_table({"a.ts": 2, "b.ts": 0}, "changeCount") == {"a.ts": 2, "b.ts": 0}

    @pytest.mark.parametrize(
        "raw",
        [
            "nope",
            [{"filePath": "a.ts"}],
            [{"filePath": "a.ts", "changeCount": -1}],
            {"a.ts": "3"},
            {"a.ts": True},
            {"": 1},
        ],
    )
    def test_rejects_bad_tables(self, raw):
        with pytest.raises(MalformedInputError):
            parse_count_table(raw, "changeCount")


class TestLoadTables:
    def test_churn(self, write_json):
        path = write_json("churn.json", [{"filePath": "b.ts", "changeCount": 2}, {"filePath": "a.ts", "changeCount": 1}])
        records = load_churn_table(path)
        assert [(r.file_path, r.change_count) for r in records] == [("a.ts", 1), ("b.ts", 2)]

    def test_complexity(self, write_json):
        path = write_json("complexity.json", {"a.ts": 4})
        assert load_complexity_table(path)[0].complex_count == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(MalformedInputError, match="not found"):
            load_churn_table(tmp_path / "nope.json")
