"""Pluggy hook specifications for minictl.

Two setup-time hooks let plugins contribute cluster backends and plugin
dependency artifacts.  Two lifecycle hooks are called after the cluster
starts and after it stops.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from minictl.infrastructure.backends.base import MiniCluster

PROJECT_NAME = "minictl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class MinictlHookSpec:
    """Hook specifications for the minictl plugin system."""

    @hookspec
    def register_backends(self) -> dict[str, type[MiniCluster]] | None:
        """Return backend name -> MiniCluster class mappings."""

    @hookspec
    def plugin_artifacts(self) -> list[str] | None:
        """Return dependency paths this plugin needs on the cluster classpath."""

    @hookspec
    def post_start(self, properties: dict[str, str], config_file: str) -> None:
        """Called after the cluster is ready and its config file is written."""

    @hookspec
    def post_stop(self) -> None:
        """Called after a running cluster has been shut down."""
