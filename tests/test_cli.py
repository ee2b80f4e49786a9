"""Tests for the command-line interface."""

import csv
import io
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from histquery import __version__
from histquery.cli import app
from histquery.cli._common import report_error
from histquery.exceptions import CacheIOError, ConfigurationError

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep config discovery and the default cache directory inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in ("HISTQUERY_CACHE_DIR", "HISTQUERY_CACHE_ENABLED", "HISTQUERY_MAX_RESULTS", "HISTQUERY_SEED"):
        monkeypatch.delenv(name, raising=False)


def _read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestQueryCommand:
    def test_writes_csv_file(self, snapshot_file, tmp_path):
        out = tmp_path / "stars.csv"
        result = runner.invoke(
            app,
            ["query", "stars", "--dataset", str(snapshot_file), "-n", "2", "-o", str(out),
             "--cache-dir", str(tmp_path / "cache")],
        )
        assert result.exit_code == 0, result.output
        assert _read_csv(out) == [
            ["project_id", "url", "stars"],
            ["2", "https://github.com/bob/medium", "300"],
            ["3", "https://github.com/carol/large", "20"],
        ]

    def test_writes_to_stdout_by_default(self, snapshot_file, tmp_path):
        result = runner.invoke(
            app,
            ["query", "commits", "-d", str(snapshot_file), "-n", "1", "--cache-dir", str(tmp_path / "cache")],
        )
        assert result.exit_code == 0, result.output
        assert "project_id,url,commits" in result.output
        assert "3,https://github.com/carol/large,500" in result.output

    def test_caches_are_created_and_reused(self, snapshot_file, tmp_path):
        cache = tmp_path / "cache"
        args = ["query", "message_sizes", "-d", str(snapshot_file), "-o", str(tmp_path / "a.csv"),
                "--cache-dir", str(cache)]
        assert runner.invoke(app, args).exit_code == 0
        assert list(cache.rglob("*.cbor"))

        args[args.index(str(tmp_path / "a.csv"))] = str(tmp_path / "b.csv")
        assert runner.invoke(app, args).exit_code == 0
        assert _read_csv(tmp_path / "a.csv") == _read_csv(tmp_path / "b.csv")

    def test_no_cache_writes_nothing(self, snapshot_file, tmp_path):
        cache = tmp_path / "cache"
        result = runner.invoke(
            app,
            ["query", "stars", "-d", str(snapshot_file), "--cache-dir", str(cache), "--no-cache"],
        )
        assert result.exit_code == 0, result.output
        assert not cache.exists()

    def test_seed_option_and_environment_agree(self, snapshot_file, tmp_path, monkeypatch):
        args = ["query", "random", "-d", str(snapshot_file), "-n", "2", "--no-cache"]
        by_option = runner.invoke(app, args + ["--seed", "11"])
        assert by_option.exit_code == 0, by_option.output
        assert by_option.output == runner.invoke(app, args + ["--seed", "11"]).output

        monkeypatch.setenv("HISTQUERY_SEED", "11")
        by_env = runner.invoke(app, args)
        assert by_env.output == by_option.output
        assert len(by_env.output.strip().splitlines()) == 3

    def test_unknown_query(self, snapshot_file):
        result = runner.invoke(app, ["query", "nonsense", "-d", str(snapshot_file)])
        assert result.exit_code == 2
        assert "Unknown query" in result.output

    def test_missing_dataset(self, tmp_path):
        result = runner.invoke(app, ["query", "stars", "-d", str(tmp_path / "absent.json")])
        assert result.exit_code == 2

    def test_malformed_dataset(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        result = runner.invoke(app, ["query", "stars", "-d", str(bad)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestOtherCommands:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_queries_lists_every_query(self):
        result = runner.invoke(app, ["queries"])
        assert result.exit_code == 0
        assert "message_sizes" in result.output
        assert "experienced_authors" in result.output

    def test_cache_info_and_clear(self, snapshot_file, tmp_path):
        cache = tmp_path / "cache"
        runner.invoke(app, ["query", "stars", "-d", str(snapshot_file), "--cache-dir", str(cache)])

        info = runner.invoke(app, ["cache-info", "-d", str(snapshot_file), "--cache-dir", str(cache)])
        assert info.exit_code == 0, info.output
        assert "Enabled" in info.output
        assert "Entries: 0" not in info.output

        cleared = runner.invoke(app, ["cache-clear", "-d", str(snapshot_file), "--cache-dir", str(cache)])
        assert cleared.exit_code == 0, cleared.output
        assert "Removed" in cleared.output
        assert list(cache.rglob("*.cbor")) == []

        again = runner.invoke(app, ["cache-info", "-d", str(snapshot_file), "--cache-dir", str(cache)])
        assert "Entries: 0" in again.output


class TestReportError:
    def test_prints_the_remedy_under_the_error(self):
        target = Console(file=io.StringIO(), width=200)
        report_error(CacheIOError(Path("c.cbor"), "disk full"), target)
        lines = target.file.getvalue().splitlines()
        assert lines[0].startswith("Error: Cache file I/O failed: c.cbor")
        assert "cache-clear" in lines[1]

    def test_errors_without_a_hint_print_one_line(self):
        target = Console(file=io.StringIO(), width=200)
        report_error(ConfigurationError("bad value"), target)
        assert target.file.getvalue().splitlines() == ["Error: bad value"]
