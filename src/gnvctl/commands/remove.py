"""Command: remove local or peer dependencies from the manifest."""

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
        ("remove lodash", ""),
        ("remove --peer typescript @org/cli", "several peers at once"),
    ],
)
@click.argument("descriptors", nargs=-1, required=True)
@click.option("-P", "--peer", is_flag=True, help="Remove from peer dependencies.")
@click.pass_obj
def remove(app: AppContext, descriptors: tuple[str, ...], peer: bool) -> None:
    """Remove DESCRIPTORS from the manifest. Absent packages are ignored."""
    from gnvctl.services.remove import RemoveService

    collection = Collection.PEER if peer else Collection.LOCAL
    app.emit(RemoveService(app.project).remove(list(descriptors), collection=collection))
