"""EmbeddedCluster — an in-process stand-in for a mini HBase cluster.

Each component (ZooKeeper, master, region server and, optionally, the
MapReduce job and task trackers) is a small TCP server on its own daemon
thread.  Components answer the ZooKeeper four-letter word ``ruok`` with
``imok``, which is also how readiness is detected: the cluster is ready
once every component answers.

Ports come from the configuration.  A missing key or a port of ``0``
binds an ephemeral port, and the bound value is written back into the
effective configuration so tests can discover it from the generated
config file.
"""

from __future__ import annotations

import logging
import shutil
import socket
import socketserver
import tempfile
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from minictl.infrastructure.backends.base import MiniCluster

if TYPE_CHECKING:
    from minictl.domain.configuration import Configuration

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
PROBE_REQUEST = b"ruok"
PROBE_RESPONSE = b"imok"


@dataclass(frozen=True)
class ComponentSpec:
    """One cluster component and the config key that holds its address."""

    name: str
    key: str
    host_port: bool = False  # value is "host:port" instead of a bare port
    mapreduce: bool = False


COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec("zookeeper", "hbase.zookeeper.property.clientPort"),
    ComponentSpec("master", "hbase.master.port"),
    ComponentSpec("regionserver", "hbase.regionserver.port"),
    ComponentSpec("jobtracker", "mapred.job.tracker", host_port=True, mapreduce=True),
    ComponentSpec(
        "tasktracker",
        "mapred.task.tracker.report.address",
        host_port=True,
        mapreduce=True,
    ),
)


class _ProbeHandler(socketserver.BaseRequestHandler):
    """Answer ``ruok`` with ``imok``; anything else gets a status line."""

    server: _ComponentServer

    def handle(self) -> None:
        try:
            data = self.request.recv(16)
        except OSError:
            return
        if data.strip() == PROBE_REQUEST:
            self.request.sendall(PROBE_RESPONSE)
        else:
            self.request.sendall(f"{self.server.component} ok\n".encode())


class _ComponentServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, component: str, address: tuple[str, int]) -> None:
        self.component = component
        super().__init__(address, _ProbeHandler)


def probe(host: str, port: int, *, timeout: float = 1.0) -> bool:
    """Return True if a component at *host*:*port* answers ``imok``."""
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            sock.sendall(PROBE_REQUEST)
            return sock.recv(16).strip() == PROBE_RESPONSE
    except OSError:
        return False


def requested_port(spec: ComponentSpec, conf: Configuration) -> int:
    """Port asked for by *conf* for *spec*, or 0 for an ephemeral port."""
    raw = conf.get(spec.key, "")
    if spec.host_port:
        raw = raw.rpartition(":")[2]
    if not raw.strip():
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"Invalid port for {spec.key}: {conf[spec.key]!r}"
        raise ValueError(msg) from exc


class EmbeddedCluster(MiniCluster):
    """In-process mini cluster made of probe-answering TCP components."""

    def __init__(
        self,
        *,
        host: str = DEFAULT_HOST,
        probe_timeout: float = 30.0,
        probe_interval: float = 0.05,
    ) -> None:
        self._host = host
        self._probe_timeout = probe_timeout
        self._probe_interval = probe_interval
        self._servers: dict[str, _ComponentServer] = {}
        self._threads: list[threading.Thread] = []
        self._root_dir: Path | None = None

    @property
    def components(self) -> dict[str, int]:
        """Running component names mapped to their bound ports."""
        return {name: server.server_address[1] for name, server in self._servers.items()}

    def start(self, conf: Configuration, *, mapreduce_enabled: bool = False) -> Configuration:
        effective = conf.copy()
        try:
            for spec in COMPONENTS:
                if spec.mapreduce and not mapreduce_enabled:
                    continue
                port = self._launch(spec, requested_port(spec, effective))
                effective[spec.key] = f"{self._host}:{port}" if spec.host_port else str(port)
            self._apply_defaults(effective)
            self._wait_until_ready()
        except Exception:
            self.shutdown()
            raise
        logger.info("Embedded cluster ready: %s", self.components)
        return effective

    def shutdown(self) -> None:
        for name, server in self._servers.items():
            server.shutdown()
            server.server_close()
            logger.debug("Stopped %s", name)
        for thread in self._threads:
            thread.join(timeout=5.0)
        self._servers.clear()
        self._threads.clear()
        if self._root_dir is not None:
            shutil.rmtree(self._root_dir, ignore_errors=True)
            self._root_dir = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _launch(self, spec: ComponentSpec, port: int) -> int:
        server = _ComponentServer(spec.name, (self._host, port))
        thread = threading.Thread(
            target=server.serve_forever,
            kwargs={"poll_interval": 0.05},
            name=f"minictl-{spec.name}",
            daemon=True,
        )
        thread.start()
        self._servers[spec.name] = server
        self._threads.append(thread)
        bound = server.server_address[1]
        logger.debug("Started %s on %s:%d", spec.name, self._host, bound)
        return bound

    def _apply_defaults(self, effective: Configuration) -> None:
        effective.setdefault("hbase.zookeeper.quorum", self._host)
        if "hbase.rootdir" not in effective:
            self._root_dir = Path(tempfile.mkdtemp(prefix="minictl-hbase-"))
            effective["hbase.rootdir"] = self._root_dir.as_uri()
        effective.setdefault("hbase.cluster.distributed", "false")
        effective.setdefault("fs.defaultFS", "file:///")

    def _wait_until_ready(self) -> None:
        deadline = time.monotonic() + self._probe_timeout
        pending = self.components
        while True:
            for name, port in list(pending.items()):
                if probe(self._host, port):
                    del pending[name]
            if not pending:
                return
            if time.monotonic() >= deadline:
                msg = f"Components not ready after {self._probe_timeout}s: {sorted(pending)}"
                raise TimeoutError(msg)
            time.sleep(self._probe_interval)
