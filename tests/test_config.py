"""Tests for configuration loading and validation."""

import os
from pathlib import Path

import pytest

from histquery.config import QueryConfig, load_config, snapshot_fingerprint
from histquery.exceptions import ConfigurationError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with an empty working directory and home, and no HISTQUERY_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in list(os.environ):
        if name.startswith("HISTQUERY_"):
            monkeypatch.delenv(name)
    return work


class TestQueryConfig:
    """Test QueryConfig defaults and validation."""

    def test_defaults(self):
        config = QueryConfig()
        assert config.cache_dir == ".histquery-cache"
        assert config.cache_enabled is True
        assert config.bind_cache_to_snapshot is True
        assert config.seed == 42
        assert config.max_results == 50
        assert config.verbosity == "normal"

    @pytest.mark.parametrize("kwargs", [
        {"cache_dir": ""},
        {"seed": -1},
        {"max_results": -5},
        {"verbosity": "loud"},
    ])
    def test_invalid_values_are_rejected(self, kwargs):
        with pytest.raises(ValueError):
            QueryConfig(**kwargs)

    def test_config_is_frozen(self):
        with pytest.raises(AttributeError):
            QueryConfig().seed = 1


class TestCacheRoot:
    def test_bound_to_snapshot_fingerprint(self):
        config = QueryConfig(cache_dir="/var/cache/hq")
        assert config.cache_root("sample") == Path("/var/cache/hq") / snapshot_fingerprint("sample")

    def test_distinct_snapshots_get_distinct_directories(self):
        config = QueryConfig()
        assert config.cache_root("a.json:1:10") != config.cache_root("a.json:2:10")

    def test_unbound_and_disabled(self):
        assert QueryConfig(cache_dir="c", bind_cache_to_snapshot=False).cache_root("x") == Path("c")
        assert QueryConfig(cache_enabled=False).cache_root("x") is None

    def test_fingerprint_is_short_and_stable(self):
        assert snapshot_fingerprint("sample") == snapshot_fingerprint("sample")
        assert len(snapshot_fingerprint("sample")) == 16


class TestLoadConfig:
    """Test merging of files, environment and overrides."""

    def test_defaults_without_any_source(self, isolated):
        assert load_config() == QueryConfig()

    def test_project_file_is_discovered(self, isolated):
        (isolated / "histquery.toml").write_text('cache_dir = "here"\nmax_results = 7\n')
        config = load_config()
        assert config.cache_dir == "here"
        assert config.max_results == 7

    def test_explicit_file_beats_project_file(self, isolated, tmp_path):
        (isolated / "histquery.toml").write_text("seed = 1\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("seed = 2\n")
        assert load_config(config_file=explicit).seed == 2

    def test_environment_beats_files(self, isolated, monkeypatch):
        (isolated / "histquery.toml").write_text("seed = 1\n")
        monkeypatch.setenv("HISTQUERY_SEED", "9")
        monkeypatch.setenv("HISTQUERY_CACHE_ENABLED", "no")
        config = load_config()
        assert config.seed == 9
        assert config.cache_enabled is False

    def test_overrides_beat_environment(self, isolated, monkeypatch):
        monkeypatch.setenv("HISTQUERY_MAX_RESULTS", "3")
        assert load_config(max_results=11).max_results == 11

    def test_none_overrides_are_ignored(self, isolated):
        assert load_config(cache_dir=None).cache_dir == ".histquery-cache"

    def test_verbose_and_quiet_flags(self, isolated):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_missing_explicit_file(self, isolated, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "absent.toml")

    def test_malformed_toml(self, isolated):
        (isolated / "histquery.toml").write_text("seed = = 3\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_unknown_key(self, isolated):
        (isolated / "histquery.toml").write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_environment_value(self, isolated, monkeypatch):
        monkeypatch.setenv("HISTQUERY_SEED", "many")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_value_is_a_configuration_error(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(seed=-3)
