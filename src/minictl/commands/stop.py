"""stop — shut down the cluster owned by this process."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from minictl.commands._base import MiniCommand

if TYPE_CHECKING:
    from minictl.commands._context import AppContext


@click.command(
    cls=MiniCommand,
    examples="""\
  # Safe to call even if nothing was started
  minictl stop""",
)
@click.pass_obj
def stop(app: AppContext) -> None:
    """Stop the cluster owned by this process. Succeeds if none is running.

    Useful to hosts that drive several commands through one context.  A
    cluster held by ``minictl start`` in another process is stopped by
    sending that process SIGINT or SIGTERM.
    """
    app.emit(app.stop_cluster())
