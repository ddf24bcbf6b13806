"""Baseline persistence exceptions."""

from pathlib import Path
from typing import Optional

from .base import ArchgateError


class BaselineError(ArchgateError):
    """Base class for baseline-related errors."""

    pass


class BaselineMissingError(BaselineError):
    """Raised when an operation needs a captured baseline and there is none."""

    def __init__(self, operation: str, path: Optional[Path] = None):
        where = f" at {path}" if path is not None else ""
        details = {"operation": operation, "remediation": "run `archgate capture` first"}
        if path is not None:
            details["path"] = str(path)
        super().__init__(f"No baseline{where}; cannot {operation}", details=details)
        self.operation = operation
        self.path = path


class BaselineLockedError(BaselineError):
    """Raised when another operation holds the baseline lock."""

    def __init__(self, lock_path: Path, holder: Optional[str] = None):
        details = {
            "lock": str(lock_path),
            "remediation": "wait for the running operation, or delete the lock file if it is stale",
        }
        if holder:
            details["holder"] = holder
        super().__init__(f"Baseline is locked: {lock_path}", details=details)
        self.lock_path = lock_path
        self.holder = holder


class InvalidBaselineError(BaselineError):
    """Raised when the baseline document cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid baseline file: {path}",
            details={
                "path": str(path),
                "reason": reason,
                "remediation": "restore the file from version control or run `archgate capture`",
            },
        )
        self.path = path
        self.reason = reason


class BaselineWriteError(BaselineError):
    """Raised when the baseline or its lock file cannot be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write {path}",
            details={
                "path": str(path),
                "reason": reason,
                "remediation": "check that the baseline directory exists and is writable",
            },
        )
        self.path = path
        self.reason = reason
