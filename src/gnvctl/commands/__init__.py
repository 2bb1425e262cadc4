"""Subcommand modules for gnvctl.

Provides register_commands() which uses deferred imports to keep
``gnvctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from gnvctl.commands.add import add
    from gnvctl.commands.install import install
    from gnvctl.commands.list_cmd import list_cmd
    from gnvctl.commands.remove import remove

    cli.add_command(add)
    cli.add_command(remove)
    cli.add_command(install)
    cli.add_command(list_cmd)
