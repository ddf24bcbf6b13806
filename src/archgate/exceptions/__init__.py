"""Exception hierarchy for archgate."""

from .base import ArchgateError
from .baseline import (
    BaselineError,
    BaselineLockedError,
    BaselineMissingError,
    BaselineWriteError,
    InvalidBaselineError,
)
from .config import ConfigurationError, InvalidConfigError
from .input import MalformedInputError, UnknownModuleError

__all__ = [
    "ArchgateError",
    "MalformedInputError",
    "UnknownModuleError",
    "BaselineError",
    "BaselineMissingError",
    "BaselineLockedError",
    "BaselineWriteError",
    "InvalidBaselineError",
    "ConfigurationError",
    "InvalidConfigError",
]
