"""Tests for the root minictl CLI."""

from click.testing import CliRunner

from minictl import __version__
from minictl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("start", "stop", "run"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner, project_root: object) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_global_flags_accepted(cli_runner: CliRunner) -> None:
    for flags in (["--json"], ["-q"], ["-v"], ["--log-json"], ["-c", "/tmp/none.toml"]):
        result = cli_runner.invoke(cli, [*flags, "--version"])
        assert result.exit_code == 0, flags


def test_stop_standalone(cli_runner: CliRunner, project_root: object) -> None:
    result = cli_runner.invoke(cli, ["--json", "stop"])
    assert result.exit_code == 0
    assert '"stopped": false' in result.output
