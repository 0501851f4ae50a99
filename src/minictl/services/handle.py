"""ClusterHandle: start a mini cluster once, share it, stop it once.

The handle owns the cluster's lifecycle for one build::

    not_started --start--> starting --ready--> ready --stop--> stopped
                                    +--fail--> faulted

* ``start`` is single-flight: the first caller launches the backend on a
  daemon thread and every concurrent caller blocks on the same readiness
  future, receiving the same configuration or the same failure.
* Once ready, further ``start`` calls return the existing configuration
  and ignore their arguments: the first caller's configuration wins.
* ``stop`` is total: it never raises and is a no-op unless the cluster
  is running.
* ``stopped`` and ``faulted`` are terminal.  Starting again requires a
  new handle.

Handles are constructed explicitly and owned by the host (the CLI's
``AppContext`` or a test harness); there is no module-level singleton.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError

from minictl.domain.configuration import Configuration, Overrides
from minictl.domain.errors import AlreadyStoppedError, StartupError
from minictl.domain.lifecycle import ServiceState, is_valid_transition
from minictl.infrastructure.backends.base import MiniCluster

logger = logging.getLogger(__name__)

BackendFactory = Callable[[], MiniCluster]


class ClusterHandle:
    """Lifecycle manager for one mini cluster.

    Parameters:
        backend_factory: Zero-argument callable creating the backend.
            Called on the background thread.
        startup_timeout: Seconds to wait for readiness.  ``None`` waits
            forever, so a hung backend blocks ``start`` indefinitely.
        shutdown_timeout: Seconds ``stop`` waits for the background
            thread to finish shutting down.  Best-effort.
    """

    def __init__(
        self,
        backend_factory: BackendFactory,
        *,
        startup_timeout: float | None = None,
        shutdown_timeout: float | None = 30.0,
    ) -> None:
        self._backend_factory = backend_factory
        self._startup_timeout = startup_timeout
        self._shutdown_timeout = shutdown_timeout

        self._lock = threading.Lock()
        self._stop_lock = threading.Lock()
        self._state = ServiceState.NOT_STARTED
        self._ready: Future[Configuration] | None = None
        self._stop_requested = threading.Event()
        self._thread: threading.Thread | None = None
        self._effective: Configuration | None = None
        self._fault: BaseException | None = None

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> ServiceState:
        with self._lock:
            return self._state

    @property
    def effective_configuration(self) -> Configuration | None:
        """A copy of the running cluster's configuration, if ready."""
        with self._lock:
            return self._effective.copy() if self._effective is not None else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        *,
        mapreduce_enabled: bool = False,
        overrides: Overrides | None = None,
    ) -> Configuration:
        """Start the cluster if needed and block until it is ready.

        Returns a copy of the effective configuration.

        Raises:
            AlreadyStoppedError: The handle has been stopped.
            StartupError: The backend failed, did not become ready in
                time, or failed on an earlier attempt.
        """
        with self._lock:
            if self._state is ServiceState.STOPPED:
                msg = "Cluster has already been stopped; start after stop is not supported"
                raise AlreadyStoppedError(msg)
            if self._state is ServiceState.FAULTED:
                msg = "Cluster failed to start earlier; re-run the build"
                raise StartupError(msg) from self._fault
            if self._state is ServiceState.NOT_STARTED:
                conf = Configuration().apply(overrides)
                self._transition(ServiceState.STARTING)
                self._ready = Future()
                self._launch(conf, mapreduce_enabled)
            else:
                logger.debug(
                    "Cluster already %s; ignoring start arguments of this caller", self._state
                )
            ready = self._ready

        assert ready is not None
        try:
            effective = ready.result(timeout=self._startup_timeout)
        except FutureTimeoutError as exc:
            state = self._mark_faulted(exc)
            if state is ServiceState.READY:
                # Became ready while the timeout fired.
                return ready.result().copy()
            if state is ServiceState.STOPPED:
                msg = "Cluster was stopped before it became ready"
                raise AlreadyStoppedError(msg) from exc
            msg = f"Cluster did not become ready within {self._startup_timeout}s"
            raise StartupError(msg) from exc
        except Exception as exc:
            msg = "Unable to start cluster"
            raise StartupError(msg) from exc
        return effective.copy()

    def stop(self) -> bool:
        """Shut the cluster down if it is running.

        Returns True if a running cluster was stopped by this call.
        Never raises.
        """
        with self._stop_lock:
            with self._lock:
                state = self._state
                ready = self._ready
            if state is ServiceState.STARTING and ready is not None:
                # Let the launch settle; its outcome decides what to stop.
                try:
                    ready.result(timeout=self._startup_timeout)
                except FutureTimeoutError as exc:
                    # A late launch sees FAULTED and shuts itself down.
                    if self._mark_faulted(exc) is ServiceState.FAULTED:
                        logger.warning(
                            "Pending start not ready within %ss; abandoning it",
                            self._startup_timeout,
                        )
                except Exception:
                    logger.debug("Pending start failed while stopping", exc_info=True)

            with self._lock:
                if self._state is not ServiceState.READY:
                    logger.debug("Stop requested while %s; nothing to do", self._state)
                    return False
                self._transition(ServiceState.STOPPED)
                self._effective = None
                thread = self._thread

            self._stop_requested.set()
            if thread is not None:
                thread.join(timeout=self._shutdown_timeout)
                if thread.is_alive():
                    logger.warning(
                        "Cluster thread still running after %ss; continuing",
                        self._shutdown_timeout,
                    )
            logger.info("Cluster stopped")
            return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, target: ServiceState) -> None:
        """Move to *target*. Caller holds ``self._lock``."""
        if not is_valid_transition(self._state, target):
            msg = f"Invalid cluster transition: {self._state} -> {target}"
            raise RuntimeError(msg)
        self._state = target

    def _mark_faulted(self, cause: BaseException) -> ServiceState:
        """Fault a pending start and return the resulting state.

        A start that already settled keeps its state (READY, STOPPED or
        FAULTED).
        """
        with self._lock:
            if self._state is ServiceState.STARTING:
                self._transition(ServiceState.FAULTED)
                self._fault = cause
            return self._state

    def _launch(self, conf: Configuration, mapreduce_enabled: bool) -> None:
        self._thread = threading.Thread(
            target=self._run,
            args=(conf, mapreduce_enabled),
            name="minictl-cluster",
            daemon=True,
        )
        self._thread.start()
        logger.info("Launching cluster (mapreduce=%s)", mapreduce_enabled)

    def _run(self, conf: Configuration, mapreduce_enabled: bool) -> None:
        """Background thread body: start, publish readiness, wait, shut down."""
        assert self._ready is not None
        ready = self._ready
        try:
            cluster = self._backend_factory()
            effective = cluster.start(conf, mapreduce_enabled=mapreduce_enabled)
        except Exception as exc:
            logger.warning("Cluster failed to start", exc_info=True)
            self._mark_faulted(exc)
            ready.set_exception(exc)
            return

        with self._lock:
            abandoned = self._state is not ServiceState.STARTING
            if not abandoned:
                self._effective = effective.copy()
                self._transition(ServiceState.READY)

        if abandoned:
            logger.warning("Cluster became ready after startup was abandoned; shutting down")
            self._shutdown(cluster)
            ready.set_exception(StartupError("Cluster startup was abandoned"))
            return

        ready.set_result(effective)
        self._stop_requested.wait()
        self._shutdown(cluster)

    @staticmethod
    def _shutdown(cluster: MiniCluster) -> None:
        try:
            cluster.shutdown()
        except Exception:
            logger.warning("Cluster shutdown failed", exc_info=True)
