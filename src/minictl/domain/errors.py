"""Exception hierarchy for cluster lifecycle and config file failures.

Each error carries a stable ``code`` that the service layer copies into
``ServiceError.code``.  The underlying cause is always chained with
``raise ... from``.
"""

from __future__ import annotations


class MinictlError(Exception):
    """Base class for all minictl errors."""

    code = "MINICTL_ERROR"


class StartupError(MinictlError):
    """The cluster failed to launch or never became ready."""

    code = "STARTUP_FAILED"


class AlreadyStoppedError(MinictlError):
    """``start`` was called on a handle that has already been stopped."""

    code = "ALREADY_STOPPED"


class ConfigFileError(MinictlError, OSError):
    """The generated configuration file could not be created, written or closed."""

    code = "IO_ERROR"


class DependencyResolutionError(MinictlError):
    """A dependency path list could not be supplied."""

    code = "DEPENDENCY_RESOLUTION"


class UnknownBackendError(MinictlError, LookupError):
    """No cluster backend is registered under the requested name."""

    code = "UNKNOWN_BACKEND"
