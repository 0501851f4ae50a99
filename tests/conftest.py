"""Shared pytest fixtures and test doubles for minictl tests."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from minictl.commands import start as start_command
from minictl.commands._context import AppContext
from minictl.config.settings import MinictlSettings
from minictl.domain.configuration import Configuration
from minictl.infrastructure.backends.base import MiniCluster
from minictl.services.handle import ClusterHandle
from minictl.services.telemetry import disable_telemetry

FAKE_ZK_PORT = "2181"
FAKE_JOB_TRACKER = "localhost:9001"


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeBackend:
    """Backend factory that records every launch and shutdown.

    Args:
        fail: Exception raised from ``start`` instead of becoming ready.
        delay: Seconds ``start`` sleeps before returning.
        gate: If set, ``start`` blocks until the event is set.
    """

    def __init__(
        self,
        *,
        fail: Exception | None = None,
        delay: float = 0.0,
        gate: threading.Event | None = None,
    ) -> None:
        self.fail = fail
        self.delay = delay
        self.gate = gate
        self.launches = 0
        self.shutdowns = 0
        self.received: list[Configuration] = []
        self.mapreduce_flags: list[bool] = []
        self._lock = threading.Lock()

    def __call__(self) -> FakeCluster:
        return FakeCluster(self)


class FakeCluster(MiniCluster):
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def start(self, conf: Configuration, *, mapreduce_enabled: bool = False) -> Configuration:
        backend = self._backend
        with backend._lock:
            backend.launches += 1
            backend.received.append(conf.copy())
            backend.mapreduce_flags.append(mapreduce_enabled)
        if backend.gate is not None:
            backend.gate.wait(timeout=5)
        if backend.delay:
            time.sleep(backend.delay)
        if backend.fail is not None:
            raise backend.fail
        effective = conf.copy()
        effective["hbase.zookeeper.property.clientPort"] = FAKE_ZK_PORT
        if mapreduce_enabled:
            effective["mapred.job.tracker"] = FAKE_JOB_TRACKER
        return effective

    def shutdown(self) -> None:
        with self._backend._lock:
            self._backend.shutdowns += 1


class ShutdownSignal:
    """Stands in for SIGINT/SIGTERM while ``minictl start`` holds a cluster.

    Each registered check runs while the cluster is held; the signal then
    "arrives" and the command goes on to stop the cluster.
    """

    def __init__(self) -> None:
        self.waits = 0
        self.checks: list[Callable[[], None]] = []

    def __call__(self) -> None:
        self.waits += 1
        for check in self.checks:
            check()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep classpath, config discovery, logging and telemetry per-test."""
    monkeypatch.setenv("CLASSPATH", "")
    monkeypatch.delenv("MINICTL_CONFIG", raising=False)
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    minictl_level = logging.getLogger("minictl").level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("minictl").setLevel(minictl_level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory used as CWD."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def handle(fake_backend: FakeBackend) -> Generator[ClusterHandle]:
    """A ClusterHandle over the fake backend, stopped after the test."""
    h = ClusterHandle(fake_backend, startup_timeout=5.0, shutdown_timeout=5.0)
    try:
        yield h
    finally:
        h.stop()


@pytest.fixture
def app(project_root: Path, handle: ClusterHandle) -> AppContext:
    """AppContext rooted at the temp project, wired to the fake handle."""
    settings = MinictlSettings.from_cli(project_root=project_root)
    return AppContext(settings, handle=handle)


@pytest.fixture(autouse=True)
def shutdown_signal(monkeypatch: pytest.MonkeyPatch) -> ShutdownSignal:
    """Release ``minictl start`` immediately instead of blocking on a signal."""
    signal = ShutdownSignal()
    monkeypatch.setattr(start_command, "wait_for_shutdown_signal", signal)
    return signal
