"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.minictl/plugins/``.
Capabilities: cluster backends, plugin dependency artifacts, lifecycle hooks.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from minictl.domain.errors import UnknownBackendError
from minictl.plugins.builtins.embedded import EmbeddedBackendPlugin
from minictl.plugins.hookspecs import PROJECT_NAME, MinictlHookSpec

if TYPE_CHECKING:
    from minictl.infrastructure.backends.base import MiniCluster
    from minictl.infrastructure.dependencies import Artifact

ENTRY_POINT_GROUP = "minictl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, backend lookup, and hook dispatch.

    The built-in ``embedded`` backend plugin is always registered, so a
    manager that never discovers anything can still start a cluster.
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MinictlHookSpec)
        self._pm.register(EmbeddedBackendPlugin(), name="embedded")
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of registered plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Registered plugin names, in registration order."""
        return [name for name, _plugin in self._pm.list_name_plugin()]

    # ------------------------------------------------------------------
    # Backends and artifacts
    # ------------------------------------------------------------------

    def backends(self) -> dict[str, type[MiniCluster]]:
        """Collect backend registrations from every plugin.

        A plugin that fails or returns something other than a dict is
        skipped with a warning.  Later registrations win on name clashes.
        """
        registry: dict[str, type[MiniCluster]] = {}
        for plugin_name, plugin in self._pm.list_name_plugin():
            hook = getattr(plugin, "register_backends", None)
            if hook is None:
                continue
            try:
                backend_map = hook()
            except Exception:
                logger.warning(
                    "Failed to collect backends from plugin %s", plugin_name, exc_info=True
                )
                continue
            if backend_map is None:
                continue
            if not isinstance(backend_map, dict):
                logger.warning("Plugin %s returned non-dict backend registrations", plugin_name)
                continue
            registry.update(backend_map)
        return registry

    def get_backend(self, name: str) -> type[MiniCluster]:
        """Return the backend class registered as *name*."""
        registry = self.backends()
        try:
            return registry[name]
        except KeyError:
            known = ", ".join(sorted(registry)) or "none"
            msg = f"Unknown cluster backend {name!r} (available: {known})"
            raise UnknownBackendError(msg) from None

    def collect_artifacts(self) -> list[Artifact]:
        """Dependency artifacts contributed by plugins, in registration order.

        Errors propagate: a plugin that cannot supply its dependencies
        makes the classpath incomplete.
        """
        from minictl.infrastructure.dependencies import Artifact

        artifacts: list[Artifact] = []
        for plugin_name, plugin in self._pm.list_name_plugin():
            hook = getattr(plugin, "plugin_artifacts", None)
            if hook is None:
                continue
            for path in hook() or []:
                artifacts.append(Artifact(os.fspath(path), name=plugin_name))
        return artifacts

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module, and classes carrying ``@hookimpl`` methods are instantiated
        and registered.  Errors are logged as warnings and never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"minictl_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a class directly; hook dispatch
        against a class leaves ``self`` unbound.
        """
        for plugin_name, plugin in list(self._pm.list_name_plugin()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any ``@hookimpl``-decorated methods.

        Pluggy's ``HookimplMarker("minictl")`` sets a ``minictl_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "minictl_impl", None):
                return True
        return False
