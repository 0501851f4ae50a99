"""run — start the cluster, run a command against it, stop the cluster."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from minictl.commands._base import MiniCommand, cluster_options
from minictl.commands.start import start_cluster

if TYPE_CHECKING:
    from minictl.commands._context import AppContext

logger = logging.getLogger(__name__)

CONF_DIR_ENV = "HBASE_CONF_DIR"


@click.command(
    cls=MiniCommand,
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
    examples="""\
  # Run the integration tests against a fresh cluster
  minictl run -- pytest tests/integration

  # MapReduce enabled, project classpath from a file
  minictl run --mapreduce --project-classpath-file target/cp.txt \\
      -- mvn failsafe:integration-test""",
)
@cluster_options
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def run(app: AppContext, command: tuple[str, ...], **options: Any) -> None:
    """Run COMMAND with a started cluster, then stop it.

    COMMAND inherits the composed classpath and HBASE_CONF_DIR pointing
    at the directory of the generated config file.  Exits with COMMAND's
    exit code.
    """
    result = start_cluster(app, **options)
    app.emit(result)

    env = os.environ.copy()
    env[CONF_DIR_ENV] = str(Path(result.data["config_file"]).parent)
    try:
        completed = subprocess.run(list(command), env=env, check=False)
        exit_code = completed.returncode
    except OSError as exc:
        click.echo(f"Unable to run {command[0]}: {exc}", err=True)
        exit_code = 127
    finally:
        app.stop_cluster()
    logger.info("Command exited with %d", exit_code)
    raise SystemExit(exit_code)
