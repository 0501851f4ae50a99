"""StartService — bring the shared cluster up and publish how to reach it.

Pipeline, each stage a precondition for the next:

RESOLVE → CLASSPATH → CONFIGURE → LAUNCH → WRITE → EVENT

The config file is written only after the cluster reported ready, so a
failed start never leaves a file describing a cluster that is not
running.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from minictl.domain.classpath import PathList, compose_classpath
from minictl.domain.configuration import Configuration, Overrides
from minictl.domain.errors import MinictlError
from minictl.infrastructure.configfile import write_configuration
from minictl.infrastructure.dependencies import DependencySources
from minictl.infrastructure.environment import (
    DEFAULT_CLASSPATH_VAR,
    current_classpath,
    publish_classpath,
)
from minictl.services.base import BaseService
from minictl.services.result import ServiceResult
from minictl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from minictl.plugins.manager import PluginManager
    from minictl.services.handle import ClusterHandle

logger = logging.getLogger(__name__)


class StartService(BaseService):
    """Starts the cluster and writes its configuration file."""

    def __init__(
        self,
        handle: ClusterHandle,
        *,
        plugins: PluginManager | None = None,
        classpath_env: str = DEFAULT_CLASSPATH_VAR,
    ) -> None:
        super().__init__(handle, plugins=plugins)
        self._classpath_env = classpath_env

    @traced
    def start(
        self,
        *,
        config_file: Path,
        mapreduce_enabled: bool = False,
        overrides: Overrides | None = None,
        dependencies: DependencySources | None = None,
    ) -> ServiceResult:
        """Start the cluster (or join the running one) and write *config_file*."""
        op = "start"
        warnings: list[str] = []
        dependencies = dependencies or DependencySources()

        try:
            # ── RESOLVE ───────────────────────────────────────────
            with trace_span("resolve"):
                project_paths = dependencies.resolve_project_paths()
                plugin_paths = [a.path for a in dependencies.resolve_plugin_artifacts()]

            # ── CLASSPATH ─────────────────────────────────────────
            with trace_span("classpath") as span:
                classpath = compose_classpath(
                    current_classpath(self._classpath_env), project_paths, plugin_paths
                )
                publish_classpath(classpath, self._classpath_env)
                entries = len(PathList.parse(classpath))
                if span:
                    span.annotate("entries", entries)

            # ── CONFIGURE ─────────────────────────────────────────
            conf = Configuration()
            for key, value in Configuration(overrides).items():
                logger.info("Setting hadoop conf property '%s' to '%s'", key, value)
                conf[key] = value

            # ── LAUNCH ────────────────────────────────────────────
            with trace_span("launch"):
                effective = self._handle.start(
                    mapreduce_enabled=mapreduce_enabled,
                    overrides=conf,
                )

            # ── WRITE ─────────────────────────────────────────────
            with trace_span("write"):
                write_configuration(config_file, effective)
        except MinictlError as exc:
            logger.debug("Start failed", exc_info=True)
            return ServiceResult.failure(op, exc, warnings=warnings)

        # ── EVENT ─────────────────────────────────────────────────
        properties = effective.to_dict()
        self._dispatch_event(
            "post_start",
            {"properties": properties, "config_file": str(config_file)},
            warnings,
        )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "config_file": str(config_file),
                "mapreduce_enabled": mapreduce_enabled,
                "classpath": {
                    "env_var": self._classpath_env,
                    "entries": entries,
                },
                "properties": properties,
            },
            warnings=warnings,
        )
