"""MiniCluster — the contract every cluster backend implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minictl.domain.configuration import Configuration


class MiniCluster(ABC):
    """A cluster that can be started once and shut down once.

    :meth:`start` runs on the handle's background thread and must block
    until every required component accepts client connections.  It
    returns the effective configuration: the input plus anything the
    cluster decided at runtime, such as bound ports.
    """

    @abstractmethod
    def start(self, conf: Configuration, *, mapreduce_enabled: bool = False) -> Configuration:
        """Launch the cluster and block until it is ready."""

    @abstractmethod
    def shutdown(self) -> None:
        """Stop every component and release resources."""
