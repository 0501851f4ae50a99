"""Locate the minictl configuration file for a project.

A directory holds configuration when it contains ``minictl.toml`` or
``.minictl/config.toml`` (the former wins).  The nearest such directory
at or above the start directory is used.  ``MINICTL_CONFIG`` bypasses
the search entirely.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "minictl.toml"
HIDDEN_CONFIG = Path(".minictl") / "config.toml"
CONFIG_ENV_VAR = "MINICTL_CONFIG"

_CANDIDATES = (Path(CONFIG_FILENAME), HIDDEN_CONFIG)


def _ancestors(start: Path) -> Iterator[Path]:
    yield start
    yield from start.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), if any.

    A ``MINICTL_CONFIG`` value is taken as-is: ``~`` is expanded and a
    relative path is read against *start*.  If it names a missing file
    the result is None; the walk is not attempted.
    """
    base = (start or Path.cwd()).resolve()

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = base / Path(override).expanduser()
        return path if path.is_file() else None

    for directory in _ancestors(base):
        for candidate in _CANDIDATES:
            path = directory / candidate
            if path.is_file():
                return path
    return None


def project_root_for(config_path: Path) -> Path:
    """The project directory a discovered config file belongs to."""
    parent = config_path.parent
    if config_path.name == HIDDEN_CONFIG.name and parent.name == HIDDEN_CONFIG.parent.name:
        return parent.parent
    return parent
