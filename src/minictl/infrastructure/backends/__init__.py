"""Mini cluster backends.

A backend is the black box that actually runs the cluster.  The
built-in ``embedded`` backend is registered by
:mod:`minictl.plugins.builtins.embedded`; third-party backends arrive
through the ``register_backends`` plugin hook.
"""

from minictl.infrastructure.backends.base import MiniCluster
from minictl.infrastructure.backends.embedded import EmbeddedCluster

__all__ = ["EmbeddedCluster", "MiniCluster"]
