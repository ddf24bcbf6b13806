"""Tests for configuration loading and validation."""

from dataclasses import FrozenInstanceError

import pytest

from archgate.config import ArchgateConfig, load_config
from archgate.exceptions import ConfigurationError, InvalidConfigError


class TestArchgateConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        cfg = ArchgateConfig()
        assert cfg.package_depth == 2
        assert cfg.cycle_mode is None
        assert cfg.allowed_cycles == 0
        assert cfg.deployable_max_depth == 8
        assert cfg.library_max_depth == 5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"package_depth": 0},
            {"cycle_mode": "auto"},
            {"allowed_cycles": -1},
            {"library_max_depth": -1},
            {"workers": 0},
            {"verbosity": "loud"},
            {"entry_point_names": []},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            ArchgateConfig(**kwargs)

    def test_cycle_mode_has_no_default(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            ArchgateConfig().require_cycle_mode()
        assert exc_info.value.key == "cycle_mode"

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            ArchgateConfig().allowed_cycles = 3


class TestLoadConfig:
    """Test source merging."""

    def test_project_file(self, isolated_env):
        (isolated_env / "archgate.toml").write_text('[archgate]\ncycle_mode = "scc"\nallowed_cycles = 2\n')
        cfg = load_config()
        assert cfg.cycle_mode == "scc"
        assert cfg.allowed_cycles == 2

    def test_tool_table(self, isolated_env):
        path = isolated_env / "pyproject.toml"
        path.write_text('[tool.archgate]\nlibrary_max_depth = 3\n')
        assert load_config(config_file=path).library_max_depth == 3

    def test_global_then_project(self, isolated_env):
        (isolated_env / "home" / ".archgate.toml").write_text("allowed_cycles = 4\npackage_depth = 3\n")
        (isolated_env / "archgate.toml").write_text("allowed_cycles = 1\n")
        cfg = load_config()
        assert cfg.allowed_cycles == 1
        assert cfg.package_depth == 3

    def test_env_overrides_file(self, isolated_env, monkeypatch):
        (isolated_env / "archgate.toml").write_text('cycle_mode = "flagged"\n')
        monkeypatch.setenv("ARCHGATE_CYCLE_MODE", "scc")
        monkeypatch.setenv("ARCHGATE_DEPLOYABLE_PACKAGES", "apps/*, tools/*")
        monkeypatch.setenv("ARCHGATE_WORKERS", "2")
        cfg = load_config()
        assert cfg.cycle_mode == "scc"
        assert cfg.deployable_packages == ["apps/*", "tools/*"]
        assert cfg.workers == 2

    def test_overrides_win_and_none_ignored(self, isolated_env, monkeypatch):
        monkeypatch.setenv("ARCHGATE_CYCLE_MODE", "scc")
        cfg = load_config(cycle_mode="flagged", workers=None)
        assert cfg.cycle_mode == "flagged"
        assert cfg.workers is None

    def test_verbose_flag(self, isolated_env):
        assert load_config(verbose=True, quiet=False).verbosity == "verbose"
        assert load_config(verbose=False, quiet=True).verbosity == "quiet"

    def test_bad_env_value(self, isolated_env, monkeypatch):
        monkeypatch.setenv("ARCHGATE_ALLOWED_CYCLES", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_unknown_key(self, isolated_env):
        (isolated_env / "archgate.toml").write_text("colour = true\n")
        with pytest.raises(ConfigurationError, match="colour"):
            load_config()

    def test_missing_explicit_file(self, isolated_env):
        with pytest.raises(ConfigurationError):
            load_config(config_file=isolated_env / "missing.toml")

    def test_invalid_toml(self, isolated_env):
        (isolated_env / "archgate.toml").write_text("cycle_mode = \n")
        with pytest.raises(ConfigurationError):
            load_config()
