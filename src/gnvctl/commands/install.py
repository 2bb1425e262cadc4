"""Command: link this package and install recorded dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gnvctl.commands._base import GnvCommand

if TYPE_CHECKING:
    from gnvctl.commands._context import AppContext


@click.command(
    cls=GnvCommand,
    examples=[
        ("install", "link this package, then install and link peers"),
        ("install --dev", "also install local dependencies"),
    ],
)
@click.option("--dev", is_flag=True, help="Also install local dependencies into node_modules.")
@click.pass_obj
def install(app: AppContext, dev: bool) -> None:
    """Link this package globally, then install peer (and with --dev, local) dependencies."""
    from gnvctl.services.install import InstallService

    app.emit(InstallService(app.project).install(install_local_also=dev))
