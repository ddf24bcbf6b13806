"""Configuration loading and management for archgate.

Configuration sources are merged in priority order:
    1. Defaults (defined in ArchgateConfig)
    2. Global config (~/.archgate.toml)
    3. Project config (./archgate.toml)
    4. Explicit config file (--config)
    5. Environment variables (ARCHGATE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(cycle_mode="scc", allowed_cycles=0)
    >>> config.cycle_mode
    'scc'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

CYCLE_MODES = ("flagged", "scc")


@dataclass(frozen=True)
class ArchgateConfig:
    """Configuration for one analysis / ratchet run.

    Attributes:
        Package grouping:
            package_depth: Number of leading path segments forming a package key
            package_roots: Only group modules under these prefixes (empty = all)
            entry_point_names: File stems recognised as a package's aggregation entry point

        Gates:
            cycle_mode: "flagged" (trust producer flags) or "scc" (recompute).
                No default: the caller has to choose.
            allowed_cycles: Maximum tolerated cycle count
            deployable_packages: Glob patterns selecting deployable units
            deployable_max_depth: Depth limit for deployable units
            library_max_depth: Depth limit for every other package

        Ratchet:
            baseline_path: Location of the committed baseline document
            tracked_metrics: Metrics the ratchet tracks (empty = all collected)

        Execution and output:
            workers: Analyzer threads (None = one per analyzer, 1 = sequential)
            priority_limit: Rows shown by the priority ranking (0 = all)
            verbosity: Logging verbosity level
    """

    # Package grouping
    package_depth: int = 2
    package_roots: list[str] = field(default_factory=list)
    entry_point_names: list[str] = field(
        default_factory=lambda: ["index", "__init__", "mod", "lib"]
    )

    # Gates
    cycle_mode: Optional[str] = None
    allowed_cycles: int = 0
    deployable_packages: list[str] = field(default_factory=lambda: ["apps/*", "services/*"])
    deployable_max_depth: int = 8
    library_max_depth: int = 5

    # Ratchet
    baseline_path: str = ".archgate-baseline.json"
    tracked_metrics: list[str] = field(default_factory=list)

    # Execution and output
    workers: Optional[int] = None
    priority_limit: int = 20
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.package_depth < 1:
            raise InvalidConfigError("package_depth", self.package_depth, "must be at least 1")
        if self.cycle_mode is not None and self.cycle_mode not in CYCLE_MODES:
            raise InvalidConfigError(
                "cycle_mode", self.cycle_mode, f"must be one of {', '.join(CYCLE_MODES)}"
            )
        if self.allowed_cycles < 0:
            raise InvalidConfigError("allowed_cycles", self.allowed_cycles, "must be non-negative")
        if self.deployable_max_depth < 0:
            raise InvalidConfigError(
                "deployable_max_depth", self.deployable_max_depth, "must be non-negative"
            )
        if self.library_max_depth < 0:
            raise InvalidConfigError("library_max_depth", self.library_max_depth, "must be non-negative")
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.priority_limit < 0:
            raise InvalidConfigError("priority_limit", self.priority_limit, "must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "must be quiet, normal or verbose")
        if not self.entry_point_names:
            raise InvalidConfigError("entry_point_names", self.entry_point_names, "must not be empty")

    def require_cycle_mode(self) -> str:
        """Return the chosen cycle mode, failing when none was selected."""
        if self.cycle_mode is None:
            raise InvalidConfigError(
                "cycle_mode",
                None,
                "choose explicitly with --cycle-mode flagged|scc or cycle_mode in archgate.toml",
            )
        return self.cycle_mode


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ArchgateConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep file/env values.

    Returns:
        Validated ArchgateConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".archgate.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "archgate.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(merged) - set(ArchgateConfig.__dataclass_fields__)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    try:
        return ArchgateConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ARCHGATE_* environment variables.

    List fields take comma-separated values, e.g.
    ``ARCHGATE_DEPLOYABLE_PACKAGES="apps/*,services/*"``.
    """
    type_hints = get_type_hints(ArchgateConfig)

    result: dict[str, Any] = {}

    for field_name in ArchgateConfig.__dataclass_fields__:
        env_key = f"ARCHGATE_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    origin = getattr(type_hint, "__origin__", None)

    if origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning its ``[archgate]`` table when present.

    A ``pyproject.toml``-style ``[tool.archgate]`` table is accepted too.
    """
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    if "tool" in data and isinstance(data["tool"], dict) and "archgate" in data["tool"]:
        return dict(data["tool"]["archgate"])
    if "archgate" in data and isinstance(data["archgate"], dict):
        return dict(data["archgate"])
    return data


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
