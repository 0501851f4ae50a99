"""End-to-end integration tests for verbose telemetry.

Validates the full pipeline:
  CLI flag (-v) -> AppContext -> enable_telemetry() -> @traced StartService.start
  -> span tree in ServiceResult.meta -> renderer outputs the timing tree.

These run against the real embedded backend.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from minictl.cli import cli


@pytest.mark.usefixtures("project_root")
class TestVerboseTelemetry:
    def setup_method(self) -> None:
        self.runner = CliRunner()

    def test_verbose_start_shows_timing_tree(self) -> None:
        result = self.runner.invoke(cli, ["-v", "start"])
        assert result.exit_code == 0, result.output
        assert "timing:" in result.stdout
        assert "StartService.start" in result.stdout
        for stage in ("resolve", "classpath", "launch", "write"):
            assert stage in result.stdout

    def test_verbose_json_includes_span_tree(self) -> None:
        result = self.runner.invoke(cli, ["-v", "--json", "start"])
        assert result.exit_code == 0, result.output
        payload, _ = json.JSONDecoder().raw_decode(result.stdout)  # start result comes first
        telemetry = payload["meta"]["telemetry"]
        assert [c["name"] for c in telemetry["children"]] == [
            "resolve",
            "classpath",
            "launch",
            "write",
        ]

    def test_non_verbose_no_timing(self) -> None:
        result = self.runner.invoke(cli, ["start"])
        assert result.exit_code == 0, result.output
        assert "timing:" not in result.stdout

    def test_verbose_logs_classpath_and_properties(self) -> None:
        result = self.runner.invoke(
            cli, ["-v", "start", "-D", "hbase.master.info.port=-1"]
        )
        assert result.exit_code == 0, result.output
        assert "Set CLASSPATH to" in result.stderr
        assert "Setting hadoop conf property 'hbase.master.info.port' to '-1'" in result.stderr
