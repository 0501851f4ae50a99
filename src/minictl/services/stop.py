"""StopService — tear the shared cluster down, tolerating "never started"."""

from __future__ import annotations

from minictl.services.base import BaseService
from minictl.services.result import ServiceResult
from minictl.services.telemetry import traced


class StopService(BaseService):
    """Stops the cluster. Always succeeds."""

    @traced
    def stop(self) -> ServiceResult:
        warnings: list[str] = []
        stopped = self._handle.stop()
        if stopped:
            self._dispatch_event("post_stop", {}, warnings)
        return ServiceResult(
            ok=True,
            op="stop",
            data={"stopped": stopped, "state": str(self._handle.state)},
            warnings=warnings,
        )
