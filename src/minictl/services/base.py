"""BaseService — shared foundation for cluster services.

Every service receives the :class:`ClusterHandle` it operates on and,
optionally, the plugin manager used to dispatch lifecycle hooks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minictl.plugins.manager import PluginManager
    from minictl.services.handle import ClusterHandle

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class StartService(BaseService):
            def start(self, ...) -> ServiceResult:
                conf = self._handle.start(...)
                ...
    """

    def __init__(self, handle: ClusterHandle, *, plugins: PluginManager | None = None) -> None:
        self._handle = handle
        self._plugins = plugins

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Call a lifecycle hook on every plugin. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            getattr(self._plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
