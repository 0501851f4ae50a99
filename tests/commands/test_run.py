"""Tests for the run command."""

from __future__ import annotations

import sys
from pathlib import Path

from click.testing import CliRunner

from minictl.cli import cli
from minictl.commands._context import AppContext
from minictl.config.settings import MinictlSettings
from minictl.domain.lifecycle import ServiceState
from minictl.services.handle import ClusterHandle
from tests.conftest import FakeBackend

_REPORT_ENV = (
    "import os, pathlib; "
    "pathlib.Path('child.txt').write_text("
    "os.environ['HBASE_CONF_DIR'] + '\\n' + os.environ['CLASSPATH'])"
)


def test_child_sees_conf_dir_and_classpath(
    cli_runner: CliRunner, app: AppContext, project_root: Path
) -> None:
    result = cli_runner.invoke(
        cli,
        ["run", "--project-path", "/classes", "--", sys.executable, "-c", _REPORT_ENV],
        obj=app,
    )

    assert result.exit_code == 0, result.output
    conf_dir, classpath = (project_root / "child.txt").read_text().splitlines()
    assert conf_dir == str(project_root / "target" / "test-classes")
    assert classpath == "/classes"


def test_exit_code_propagated_and_cluster_stopped(
    cli_runner: CliRunner, app: AppContext, handle: ClusterHandle, fake_backend: FakeBackend
) -> None:
    result = cli_runner.invoke(
        cli, ["run", "--", sys.executable, "-c", "raise SystemExit(3)"], obj=app
    )

    assert result.exit_code == 3
    assert handle.state is ServiceState.STOPPED
    assert fake_backend.shutdowns == 1


def test_missing_executable(cli_runner: CliRunner, app: AppContext, handle: ClusterHandle) -> None:
    result = cli_runner.invoke(cli, ["run", "--", "definitely-not-a-command-xyz"], obj=app)

    assert result.exit_code == 127
    assert "Unable to run definitely-not-a-command-xyz" in result.stderr
    assert handle.state is ServiceState.STOPPED


def test_startup_failure_skips_command(cli_runner: CliRunner, project_root: Path) -> None:
    failing = ClusterHandle(FakeBackend(fail=RuntimeError("boom")), startup_timeout=5)
    app = AppContext(MinictlSettings.from_cli(project_root=project_root), handle=failing)

    result = cli_runner.invoke(
        cli, ["run", "--", sys.executable, "-c", _REPORT_ENV], obj=app
    )

    assert result.exit_code == 1
    assert not (project_root / "child.txt").exists()


def test_command_required(cli_runner: CliRunner, app: AppContext) -> None:
    result = cli_runner.invoke(cli, ["run"], obj=app)
    assert result.exit_code == 2
