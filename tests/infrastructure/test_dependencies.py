"""Tests for dependency path sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from minictl.domain.errors import DependencyResolutionError
from minictl.infrastructure.dependencies import (
    Artifact,
    DependencySources,
    read_classpath_file,
)
from minictl.plugins.hookspecs import hookimpl
from minictl.plugins.manager import PluginManager


class _ArtifactPlugin:
    @hookimpl
    def plugin_artifacts(self) -> list[str]:
        return ["/plugin/hbase-test.jar", "/plugin/zookeeper.jar"]


class _BrokenArtifactPlugin:
    @hookimpl
    def plugin_artifacts(self) -> list[str]:
        raise RuntimeError("repository offline")


class TestReadClasspathFile:
    def test_delimiter_separated(self, tmp_path: Path) -> None:
        cp = tmp_path / "cp.txt"
        cp.write_text("/a.jar:/b.jar\n", encoding="utf-8")
        assert read_classpath_file(cp) == ["/a.jar", "/b.jar"]

    def test_newline_separated_with_blanks(self, tmp_path: Path) -> None:
        cp = tmp_path / "cp.txt"
        cp.write_text("/a.jar\n\n  /b.jar  \n/c.jar:/d.jar", encoding="utf-8")
        assert read_classpath_file(cp) == ["/a.jar", "/b.jar", "/c.jar", "/d.jar"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DependencyResolutionError, match="classpath file") as exc_info:
            read_classpath_file(tmp_path / "missing.txt")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)


class TestDependencySources:
    def test_defaults_are_empty(self) -> None:
        sources = DependencySources()
        assert sources.resolve_project_paths() == []
        assert sources.resolve_plugin_artifacts() == []

    def test_explicit_paths_before_file_entries(self, tmp_path: Path) -> None:
        cp = tmp_path / "cp.txt"
        cp.write_text("/from-file.jar", encoding="utf-8")
        sources = DependencySources(project_paths=["/explicit.jar"], classpath_file=cp)
        assert sources.resolve_project_paths() == ["/explicit.jar", "/from-file.jar"]

    def test_configured_plugin_paths_become_artifacts(self) -> None:
        sources = DependencySources(plugin_paths=["/tool/hbase.jar"])
        assert sources.resolve_plugin_artifacts() == [Artifact("/tool/hbase.jar")]

    def test_plugin_paths_kept_verbatim(self) -> None:
        sources = DependencySources(plugin_paths=["", "/lib//x.jar", "./y.jar"])
        artifacts = sources.resolve_plugin_artifacts()
        assert [a.path for a in artifacts] == ["", "/lib//x.jar", "./y.jar"]
        assert artifacts[1].file == Path("/lib/x.jar")

    def test_plugin_contributed_artifacts_follow_configured(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ArtifactPlugin(), name="hbase-test")
        sources = DependencySources(plugin_paths=["/tool/first.jar"], plugins=pm)

        paths = [a.path for a in sources.resolve_plugin_artifacts()]

        assert paths == [
            "/tool/first.jar",
            "/plugin/hbase-test.jar",
            "/plugin/zookeeper.jar",
        ]

    def test_failing_plugin_raises_resolution_error(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenArtifactPlugin(), name="broken")
        sources = DependencySources(plugins=pm)

        with pytest.raises(DependencyResolutionError) as exc_info:
            sources.resolve_plugin_artifacts()
        assert "repository offline" in str(exc_info.value.__cause__)
