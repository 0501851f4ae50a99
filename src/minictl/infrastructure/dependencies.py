"""Dependency path sources consumed when composing the classpath.

The build tool has already resolved everything; this module only
gathers the resulting path lists from the places they can come from:

* project test-scope paths given explicitly or through a classpath file
  (for example the output of ``mvn dependency:build-classpath``),
* the tool's own plugin artifacts, from configuration and from plugins
  implementing the ``plugin_artifacts`` hook.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from minictl.domain.classpath import PATH_DELIMITER
from minictl.domain.errors import DependencyResolutionError

if TYPE_CHECKING:
    from minictl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """A resolved dependency artifact.

    ``path`` is kept exactly as supplied; classpath de-duplication
    compares these strings, so it is never normalised.
    """

    path: str
    name: str | None = None

    @property
    def file(self) -> Path:
        return Path(self.path)


def read_classpath_file(path: Path, *, delimiter: str = PATH_DELIMITER) -> list[str]:
    """Read classpath entries from *path*.

    Entries may be separated by *delimiter*, by newlines, or both.
    Blank entries are dropped.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Unable to read project classpath file: {path}"
        raise DependencyResolutionError(msg) from exc
    parts = re.split(rf"[\r\n{re.escape(delimiter)}]+", raw)
    return [part.strip() for part in parts if part.strip()]


@dataclass
class DependencySources:
    """Where the project and plugin dependency lists come from."""

    project_paths: Sequence[str] = ()
    classpath_file: Path | None = None
    plugin_paths: Sequence[str] = ()
    plugins: PluginManager | None = field(default=None, repr=False)

    def resolve_project_paths(self) -> list[str]:
        """Explicit project paths first, then the classpath file entries."""
        paths = list(self.project_paths)
        if self.classpath_file is not None:
            paths.extend(read_classpath_file(self.classpath_file))
        return paths

    def resolve_plugin_artifacts(self) -> list[Artifact]:
        """Configured plugin paths first, then plugin-provided artifacts."""
        artifacts = [Artifact(p) for p in self.plugin_paths]
        if self.plugins is None:
            return artifacts
        try:
            contributed = self.plugins.collect_artifacts()
        except Exception as exc:
            msg = "Unable to collect plugin dependency artifacts"
            raise DependencyResolutionError(msg) from exc
        artifacts.extend(contributed)
        logger.debug("Resolved %d plugin artifacts", len(artifacts))
        return artifacts
