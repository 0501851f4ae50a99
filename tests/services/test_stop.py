"""Tests for StopService."""

from __future__ import annotations

from minictl.plugins.hookspecs import hookimpl
from minictl.plugins.manager import PluginManager
from minictl.services.handle import ClusterHandle
from minictl.services.stop import StopService
from tests.conftest import FakeBackend


class _StopRecorder:
    def __init__(self) -> None:
        self.stopped = 0

    @hookimpl
    def post_stop(self) -> None:
        self.stopped += 1


class TestStopService:
    def test_never_started_is_ok(self, handle: ClusterHandle) -> None:
        result = StopService(handle).stop()
        assert result.ok
        assert result.op == "stop"
        assert result.data == {"stopped": False, "state": "not_started"}

    def test_stops_running_cluster(self, handle: ClusterHandle, fake_backend: FakeBackend) -> None:
        handle.start()
        result = StopService(handle).stop()
        assert result.ok
        assert result.data == {"stopped": True, "state": "stopped"}
        assert fake_backend.shutdowns == 1

    def test_repeated_stop_is_ok(self, handle: ClusterHandle) -> None:
        handle.start()
        StopService(handle).stop()
        result = StopService(handle).stop()
        assert result.ok
        assert result.data["stopped"] is False

    def test_post_stop_only_when_stopped(self, handle: ClusterHandle) -> None:
        recorder = _StopRecorder()
        pm = PluginManager()
        pm.register_plugin(recorder, name="recorder")
        service = StopService(handle, plugins=pm)

        service.stop()
        assert recorder.stopped == 0

        handle.start()
        service.stop()
        service.stop()
        assert recorder.stopped == 1
