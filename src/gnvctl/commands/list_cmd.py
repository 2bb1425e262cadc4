"""Command: show recorded local and peer dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gnvctl.commands._base import GnvCommand

if TYPE_CHECKING:
    from gnvctl.commands._context import AppContext


@click.command(
    "list",
    cls=GnvCommand,
    examples=[("list", ""), ("--json list", "machine-readable, for scripts")],
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List local and peer dependencies recorded in the manifest."""
    from gnvctl.services.listing import ListService

    app.emit(ListService(app.project).list_dependencies())
