"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  It owns the process's :class:`ClusterHandle`, so
``start``, ``run`` and ``stop`` in one process all act on the same
cluster, and it stops that cluster when the CLI exits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from minictl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from minictl.config.settings import MinictlSettings
    from minictl.infrastructure.backends.base import MiniCluster
    from minictl.plugins.manager import PluginManager
    from minictl.services.handle import ClusterHandle
    from minictl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The plugin manager and cluster handle are created lazily, so
    ``--help`` and ``--version`` never load plugins.  Hosts and tests may
    inject either one.
    """

    def __init__(
        self,
        settings: MinictlSettings,
        *,
        handle: ClusterHandle | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self.settings = settings
        self.backend_name = settings.cluster.backend
        self._handle = handle
        self._plugins = plugins

        from minictl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from minictl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugins is None:
            from minictl.plugins.manager import PluginManager

            self._plugins = PluginManager()
            if self.settings.plugins.enabled:
                local_dir = self.settings.resolve_path(self.settings.plugins.local_dir)
                try:
                    self._plugins.discover_and_load(local_dir=local_dir)
                except Exception:
                    logger.warning("Plugin discovery failed", exc_info=True)
        return self._plugins

    @property
    def handle(self) -> ClusterHandle:
        """The cluster handle for this process (created on first access).

        The backend class is looked up when the cluster launches, so an
        unknown backend name surfaces as a startup failure, never as a
        stop failure.
        """
        if self._handle is None:
            from minictl.services.handle import ClusterHandle

            cluster = self.settings.cluster
            self._handle = ClusterHandle(
                self._create_backend,
                startup_timeout=cluster.startup_timeout_or_none,
                shutdown_timeout=cluster.shutdown_timeout,
            )
        return self._handle

    def _create_backend(self) -> MiniCluster:
        return self.plugins.get_backend(self.backend_name)()

    def stop_cluster(self) -> ServiceResult:
        """Stop this process's cluster through StopService."""
        from minictl.services.stop import StopService

        return StopService(self.handle, plugins=self._plugins).stop()

    def close(self) -> None:
        """Stop a cluster started by this process. Registered as a close callback."""
        if self._handle is None:
            return
        result = self.stop_cluster()
        if result.data.get("stopped"):
            logger.info("Stopped cluster on exit")

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if settings.quiet and not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
