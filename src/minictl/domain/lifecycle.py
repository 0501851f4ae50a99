"""Cluster lifecycle states and the allowed transitions between them.

A handle moves forward only: it is started at most once and stopped at
most once.  ``faulted`` and ``stopped`` are terminal; a new handle is
needed to run another cluster.
"""

from __future__ import annotations

from enum import StrEnum


class ServiceState(StrEnum):
    """Lifecycle state of a cluster handle."""

    NOT_STARTED = "not_started"
    STARTING = "starting"
    READY = "ready"
    STOPPED = "stopped"
    FAULTED = "faulted"


TRANSITIONS: dict[ServiceState, list[ServiceState]] = {
    ServiceState.NOT_STARTED: [ServiceState.STARTING],
    ServiceState.STARTING: [ServiceState.READY, ServiceState.FAULTED],
    ServiceState.READY: [ServiceState.STOPPED],
    ServiceState.STOPPED: [],
    ServiceState.FAULTED: [],
}

TERMINAL_STATES = frozenset({ServiceState.STOPPED, ServiceState.FAULTED})


def is_valid_transition(current: ServiceState, target: ServiceState) -> bool:
    """Check if moving from *current* to *target* is allowed."""
    return target in TRANSITIONS.get(current, [])
