"""Publish values to the process environment for spawned children."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

DEFAULT_CLASSPATH_VAR = "CLASSPATH"


def current_classpath(
    var: str = DEFAULT_CLASSPATH_VAR,
    environ: MutableMapping[str, str] | None = None,
) -> str:
    """The classpath visible to this process (empty if unset)."""
    env = os.environ if environ is None else environ
    return env.get(var, "")


def publish_classpath(
    classpath: str,
    var: str = DEFAULT_CLASSPATH_VAR,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Install *classpath* so every process spawned afterwards inherits it."""
    env = os.environ if environ is None else environ
    env[var] = classpath
    logger.info("Set %s to: %s", var, classpath)
