"""Classpath composition for processes spawned by the mini cluster.

Build tools often load their own dependencies through a private class
loader, so a child process started from inside the build cannot rebuild
the classpath on its own. The composed value merges three ordered
sources into one list that the child inherits through the environment:

1. the classpath already visible to the current process,
2. the project's resolved test dependencies,
3. this tool's own plugin dependencies.

First occurrence wins, so a project can pin a version of a jar that a
plugin also depends on by listing it earlier.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

PATH_DELIMITER = ":"


@dataclass(frozen=True)
class PathList:
    """Ordered classpath entries rendered with a fixed delimiter.

    ``entries`` keeps the components of a parsed string exactly as found
    (duplicates and empty components included) so that ``render()``
    round-trips the original text.  De-duplication applies only to paths
    added through :meth:`extend_unique`.
    """

    entries: tuple[str, ...] = ()
    delimiter: str = PATH_DELIMITER

    @classmethod
    def parse(cls, text: str, *, delimiter: str = PATH_DELIMITER) -> PathList:
        """Split *text* on *delimiter*. An empty string yields an empty list."""
        if not text:
            return cls((), delimiter)
        return cls(tuple(text.split(delimiter)), delimiter)

    def render(self) -> str:
        return self.delimiter.join(self.entries)

    def seen(self) -> set[str]:
        """Non-empty components already present."""
        return {entry for entry in self.entries if entry}

    def extend_unique(self, *sources: Iterable[str]) -> PathList:
        """Return a new list with each unseen path of *sources* appended.

        Sources are consumed in order against one shared seen set, so a
        path contributed by an earlier source is never repeated by a later
        one.  Empty path strings are skipped.
        """
        seen = self.seen()
        added: list[str] = []
        for source in sources:
            for path in source:
                if not path or path in seen:
                    continue
                seen.add(path)
                added.append(path)
        return PathList((*self.entries, *added), self.delimiter)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: object) -> bool:
        return path in self.entries


def compose_classpath(
    existing: str,
    project_paths: Iterable[str],
    plugin_paths: Iterable[str],
    *,
    delimiter: str = PATH_DELIMITER,
) -> str:
    """Merge the three classpath sources into one duplicate-free string.

    Examples:
        >>> compose_classpath("/a:/b", ["/b", "/c"], ["/c", "/d"])
        '/a:/b:/c:/d'
        >>> compose_classpath("", ["/x"], [])
        '/x'
    """
    base = PathList.parse(existing, delimiter=delimiter)
    return base.extend_unique(project_paths, plugin_paths).render()
