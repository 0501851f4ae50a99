"""Click building blocks shared by minictl commands.

``MiniCommand`` and ``MiniGroup`` take an ``examples`` text printed by
``--examples`` so ``--help`` stays short.  ``cluster_options`` is the
option set accepted by every command that launches a cluster.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from minictl.domain.configuration import parse_property


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag when an examples text is given."""

    examples: str | None

    def _init_examples(self, params: list[click.Parameter], examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if not value or ctx.resilient_parsing:
                return
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

        params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show,
                help="Show usage examples.",
            )
        )


class MiniCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(self.params, examples)


class MiniGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are ``MiniCommand`` unless told otherwise."""

    command_class = MiniCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(self.params, examples)


def _parse_defines(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values:
        try:
            pairs.append(parse_property(value))
        except ValueError as exc:
            raise click.BadParameter(str(exc)) from exc
    return pairs


_CLUSTER_OPTIONS = (
    click.option(
        "--config-file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Where to write the cluster config (default: [cluster] config_file).",
    ),
    click.option(
        "--mapreduce/--no-mapreduce",
        "mapreduce_enabled",
        default=None,
        help="Also start the MapReduce job and task trackers.",
    ),
    click.option(
        "-D",
        "--define",
        "defines",
        multiple=True,
        callback=_parse_defines,
        metavar="KEY=VALUE",
        help="Extra cluster configuration property (repeatable).",
    ),
    click.option(
        "--project-path",
        "project_paths",
        multiple=True,
        help="Project test classpath entry (repeatable).",
    ),
    click.option(
        "--project-classpath-file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="File listing the project test classpath.",
    ),
    click.option(
        "--plugin-path",
        "plugin_paths",
        multiple=True,
        help="Plugin dependency artifact path (repeatable).",
    ),
    click.option("--backend", default=None, help="Cluster backend name."),
)


def cluster_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the cluster launch options, in declaration order."""
    for option in reversed(_CLUSTER_OPTIONS):
        func = option(func)
    return func
