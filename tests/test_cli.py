"""Tests for the command-line entry point."""

import json

import pytest
from typer.testing import CliRunner

from conftest import json_handler, make_engine
from pkgintel import __version__, cli

runner = CliRunner()


@pytest.fixture
def stub_engine(monkeypatch):
    def install(handler):
        monkeypatch.setattr(cli, "_setup", lambda settings: make_engine(handler))

    return install


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_shows_overrides(monkeypatch):
    monkeypatch.setenv("USER_AGENT", "cli-test/1.0")
    result = runner.invoke(cli.app, ["config"])
    assert result.exit_code == 0
    assert "cli-test/1.0" in result.output


def test_summary_json(stub_engine, crates_package):
    stub_engine(json_handler(crates_package))

    result = runner.invoke(cli.app, ["summary", "crates", "serde", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["ok"] is True
    assert payload["data"]["version"] == "1.0.188"


def test_timeline_table(stub_engine, pypi_package):
    stub_engine(json_handler(pypi_package))

    result = runner.invoke(cli.app, ["timeline", "pypi", "requests", "-n", "2"])

    assert result.exit_code == 0
    assert "2.32.0rc1" in result.output
    assert "2.30.0" not in result.output


def test_failure_exits_non_zero(stub_engine):
    stub_engine(json_handler({}, status=429))

    result = runner.invoke(cli.app, ["maintenance", "npm", "lodash"])

    assert result.exit_code == 1
    assert "RATE_LIMITED" in result.output


def test_summary_labels_crates_counter_as_recent(stub_engine, crates_package):
    stub_engine(json_handler(crates_package))

    result = runner.invoke(cli.app, ["summary", "crates", "serde"])

    assert result.exit_code == 0
    assert "Recent Downloads" in result.output
    assert "10,000,000" in result.output
