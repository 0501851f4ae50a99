"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``minictl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from minictl.plugins.hookspecs import hookimpl
from minictl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
