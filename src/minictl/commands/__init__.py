"""Subcommand modules for minictl.

Provides register_commands(), which uses deferred imports to keep
``minictl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the lifecycle commands on the root CLI group."""
    from minictl.commands.run import run
    from minictl.commands.start import start
    from minictl.commands.stop import stop

    cli.add_command(start)
    cli.add_command(stop)
    cli.add_command(run)
