"""Tests for the archgate exception hierarchy."""

from pathlib import Path

from archgate.exceptions import (
    ArchgateError,
    BaselineError,
    BaselineLockedError,
    BaselineMissingError,
    BaselineWriteError,
    ConfigurationError,
    InvalidBaselineError,
    InvalidConfigError,
    MalformedInputError,
    UnknownModuleError,
)


class TestHierarchy:
    def test_all_derive_from_base(self):
        for cls in (
            MalformedInputError,
            BaselineError,
            ConfigurationError,
        ):
            assert issubclass(cls, ArchgateError)

    def test_unknown_module_is_malformed_input(self):
        assert issubclass(UnknownModuleError, MalformedInputError)

    def test_baseline_errors(self):
        for cls in (BaselineMissingError, BaselineLockedError, BaselineWriteError, InvalidBaselineError):
            assert issubclass(cls, BaselineError)


class TestDetails:
    """Every error names the entity and carries a remediation where one exists."""

    def test_str_includes_details(self):
        err = ArchgateError("boom", details={"k": "v"})
        assert str(err) == "boom (k=v)"
        assert str(ArchgateError("plain")) == "plain"

    def test_unknown_module(self):
        err = UnknownModuleError("a.ts", "b.ts")
        assert err.details["entity"] == "a.ts -> b.ts"
        assert "remediation" in err.details

    def test_baseline_missing(self):
        err = BaselineMissingError("tighten", Path("b.json"))
        assert err.details["operation"] == "tighten"
        assert err.details["path"] == "b.json"

    def test_locked(self):
        err = BaselineLockedError(Path("b.json.lock"), holder="pid 1")
        assert err.details["holder"] == "pid 1"

    def test_write_error(self):
        err = BaselineWriteError(Path("b.json"), "Permission denied")
        assert err.details["path"] == "b.json"
        assert err.details["reason"] == "Permission denied"
        assert "remediation" in err.details

    def test_invalid_config(self):
        err = InvalidConfigError("workers", 0, "must be at least 1")
        assert err.key == "workers"
        assert err.details["value"] == "0"
