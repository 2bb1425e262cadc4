"""Command: record local or peer dependencies, then install."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gnvctl.commands._base import GnvCommand
from gnvctl.domain.types import Collection

if TYPE_CHECKING:
    from gnvctl.commands._context import AppContext


@click.command(
    cls=GnvCommand,
    examples=[
        ("add lodash", "record lodash@latest as local, then install"),
        ("add lodash@4.17.21 @babel/core@7.24.0", "pin versions, scoped names allowed"),
        ("add --peer typescript", "global install, then link into this package"),
    ],
)
@click.argument("descriptors", nargs=-1, required=True)
@click.option(
    "-P",
    "--peer",
    is_flag=True,
    help="Record as peer dependencies (global install + link) instead of local.",
)
@click.pass_obj
def add(app: AppContext, descriptors: tuple[str, ...], peer: bool) -> None:
    """Add DESCRIPTORS ([@scope/]name[@version]) to the manifest and install them."""
    from gnvctl.services.add import AddService

    collection = Collection.PEER if peer else Collection.LOCAL
    app.emit(AddService(app.project).add(list(descriptors), collection=collection))
