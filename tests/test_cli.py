"""Tests for the root mintdctl CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from mintdctl import __version__
from mintdctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "mintdctl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_config")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "validate"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


# --- Registered commands ---


@pytest.mark.parametrize("name", ["validate", "render", "plan", "deploy", "launch"])
def test_command_registered(cli_runner: CliRunner, name: str) -> None:
    result = cli_runner.invoke(cli, [name, "--help"])
    assert result.exit_code == 0
    assert "--examples" in result.output
    assert "Run with --examples for usage examples." in result.output
