"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, minictl.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_CONFIG_FILE = "target/test-classes/hbase-site.xml"


class ClusterConfig(BaseModel):
    """[cluster] section."""

    model_config = {"frozen": True}

    backend: str = "embedded"
    config_file: str = DEFAULT_CONFIG_FILE
    mapreduce_enabled: bool = False
    startup_timeout: float = 300.0  # <= 0 waits forever
    shutdown_timeout: float = 30.0
    hadoop: dict[str, str] = Field(default_factory=dict)

    @property
    def startup_timeout_or_none(self) -> float | None:
        return self.startup_timeout if self.startup_timeout > 0 else None


class ClasspathConfig(BaseModel):
    """[classpath] section."""

    model_config = {"frozen": True}

    env_var: str = "CLASSPATH"
    project: list[str] = Field(default_factory=list)
    project_file: str | None = None
    plugin: list[str] = Field(default_factory=list)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".minictl/plugins"
