"""Themed in-memory Rich rendering for minictl results.

Everything is rendered into a buffer and handed back as a string, so
``format_result`` stays a pure ``ServiceResult -> str`` function.  Rich
drops escape codes on its own when the buffer is not a terminal and
honors ``NO_COLOR``.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

MINICTL_THEME = Theme(
    {
        "mini.ok": "bold green",
        "mini.error": "bold red",
        "mini.warning": "bold yellow",
        "mini.op": "bold cyan",
        "mini.key": "dim",
        "mini.path": "dim",
        "mini.port": "bold blue",
        "mini.host": "blue",
    }
)

# Hadoop property name suffix -> style
_PROPERTY_STYLES = (
    (".port", "mini.port"),
    ("clientPort", "mini.port"),
    (".quorum", "mini.host"),
    (".address", "mini.host"),
    (".dir", "mini.path"),
)


class RenderBuffer:
    """A themed console writing to memory."""

    def __init__(self, *, no_color: bool = False, width: int | None = None) -> None:
        self._buffer = StringIO()
        self.console = Console(
            file=self._buffer,
            theme=MINICTL_THEME,
            no_color=no_color,
            highlight=False,
            width=width or DEFAULT_WIDTH,
        )

    def text(self) -> str:
        """Everything printed so far, without the trailing newline."""
        return self._buffer.getvalue().rstrip("\n")


def style_for_property(name: str) -> str:
    """Style for a cluster configuration value, keyed on its property name."""
    for suffix, style in _PROPERTY_STYLES:
        if name.endswith(suffix):
            return style
    return ""
