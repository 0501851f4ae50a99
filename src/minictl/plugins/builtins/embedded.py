"""Built-in plugin providing the ``embedded`` cluster backend."""

from __future__ import annotations

from minictl.infrastructure.backends.base import MiniCluster
from minictl.infrastructure.backends.embedded import EmbeddedCluster
from minictl.plugins.hookspecs import hookimpl


class EmbeddedBackendPlugin:
    """Registers :class:`EmbeddedCluster` under the name ``embedded``."""

    @hookimpl
    def register_backends(self) -> dict[str, type[MiniCluster]]:
        return {"embedded": EmbeddedCluster}
