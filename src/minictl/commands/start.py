"""start — launch the shared cluster and write its configuration file."""

from __future__ import annotations

import signal
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from minictl.commands._base import MiniCommand, cluster_options

if TYPE_CHECKING:
    from minictl.commands._context import AppContext
    from minictl.services.result import ServiceResult


def start_cluster(
    app: AppContext,
    *,
    config_file: Path | None,
    mapreduce_enabled: bool | None,
    defines: list[tuple[str, str]],
    project_paths: tuple[str, ...],
    project_classpath_file: Path | None,
    plugin_paths: tuple[str, ...],
    backend: str | None,
) -> ServiceResult:
    """Merge CLI options over settings and run StartService."""
    from minictl.infrastructure.dependencies import DependencySources
    from minictl.services.start import StartService

    settings = app.settings
    if backend:
        app.backend_name = backend

    classpath_file = project_classpath_file
    if classpath_file is None and settings.classpath.project_file:
        classpath_file = settings.resolve_path(settings.classpath.project_file)

    dependencies = DependencySources(
        project_paths=[*settings.classpath.project, *project_paths],
        classpath_file=classpath_file,
        plugin_paths=[*settings.classpath.plugin, *plugin_paths],
        plugins=app.plugins,
    )
    overrides = [*settings.cluster.hadoop.items(), *defines]
    if mapreduce_enabled is None:
        mapreduce_enabled = settings.cluster.mapreduce_enabled

    service = StartService(
        app.handle,
        plugins=app.plugins,
        classpath_env=settings.classpath.env_var,
    )
    return service.start(
        config_file=settings.resolve_path(config_file or settings.cluster.config_file),
        mapreduce_enabled=mapreduce_enabled,
        overrides=overrides,
        dependencies=dependencies,
    )


def wait_for_shutdown_signal() -> None:
    """Block until SIGINT or SIGTERM arrives."""
    received = threading.Event()
    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, lambda _sig, _frame: received.set())
    try:
        while not received.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@click.command(
    cls=MiniCommand,
    examples="""\
  # Start with defaults and hold the cluster until Ctrl+C
  minictl start

  # Write the config somewhere else and add MapReduce
  minictl start --config-file build/it/hbase-site.xml --mapreduce

  # Extra properties and the project's test classpath
  minictl start -D hbase.master.port=16000 --project-classpath-file target/cp.txt

  # Background it for another process, then stop it with SIGTERM
  minictl -q start > cluster.path &
  kill %1""",
)
@cluster_options
@click.pass_obj
def start(app: AppContext, **options: Any) -> None:
    """Start the shared mini cluster and write its configuration file.

    The cluster lives as long as this process: the command holds it until
    SIGINT or SIGTERM, then stops it.  To run a single command against a
    cluster, use ``minictl run``.
    """
    app.emit(start_cluster(app, **options))
    wait_for_shutdown_signal()
    app.emit(app.stop_cluster())
