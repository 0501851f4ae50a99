"""Root CLI group for minictl with global flags and command registration."""

from __future__ import annotations

import click

from minictl import __version__
from minictl.commands import register_commands
from minictl.commands._base import MiniGroup
from minictl.commands._context import AppContext
from minictl.config.settings import MinictlSettings


@click.group(cls=MiniGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="minictl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing and debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """minictl — start, share and stop a mini cluster for one build."""
    if not isinstance(ctx.obj, AppContext):
        settings = MinictlSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
        ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
