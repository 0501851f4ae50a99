"""Hadoop-style XML configuration files.

The generated file is what test code reads to find the running cluster::

    <?xml version='1.0' encoding='UTF-8'?>
    <configuration>
      <property>
        <name>hbase.zookeeper.property.clientPort</name>
        <value>52311</value>
      </property>
    </configuration>

INVARIANT: the file handle is released on every exit path.  A close
failure is reported only when nothing failed before it.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path

from minictl.domain.configuration import Configuration
from minictl.domain.errors import ConfigFileError

logger = logging.getLogger(__name__)


def render_configuration(conf: Mapping[str, str]) -> ET.ElementTree:
    """Build the ``<configuration>`` element tree for *conf*."""
    root = ET.Element("configuration")
    for key, value in conf.items():
        prop = ET.SubElement(root, "property")
        ET.SubElement(prop, "name").text = key
        ET.SubElement(prop, "value").text = value
    tree = ET.ElementTree(root)
    ET.indent(tree, space="  ")
    return tree


def write_configuration(path: Path, conf: Mapping[str, str]) -> Path:
    """Write *conf* to *path*, creating parent directories on demand.

    Any existing file is overwritten.  Raises :class:`ConfigFileError`
    chained to the underlying OSError on directory creation, open, write
    or close failure.
    """
    parent = path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Unable to create config file directory: {parent}"
        raise ConfigFileError(msg) from exc

    tree = render_configuration(conf)
    try:
        stream = path.open("wb")
    except OSError as exc:
        msg = f"Unable to write to config file: {path}"
        raise ConfigFileError(msg) from exc

    write_error: OSError | None = None
    try:
        tree.write(stream, encoding="UTF-8", xml_declaration=True)
        stream.write(b"\n")
    except OSError as exc:
        write_error = exc
    finally:
        try:
            stream.close()
        except OSError as exc:
            if write_error is None:
                msg = f"Unable to close config file stream: {path}"
                raise ConfigFileError(msg) from exc
            logger.warning("Also failed to close %s after a write error", path)

    if write_error is not None:
        msg = f"Unable to write to config file: {path}"
        raise ConfigFileError(msg) from write_error

    logger.info("Wrote %s", path)
    return path


def read_configuration(path: Path) -> Configuration:
    """Parse a configuration file written by :func:`write_configuration`."""
    tree = ET.parse(path)
    conf = Configuration()
    for prop in tree.getroot().iter("property"):
        name = prop.findtext("name")
        if name is None:
            continue
        conf[name] = prop.findtext("value") or ""
    return conf
