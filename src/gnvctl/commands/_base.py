"""Click command class with an ``--examples`` flag.

Commands declare examples as ``(arguments, what it does)`` pairs. ``--help``
stays short; ``--examples`` prints each invocation with its note and exits.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

PROG = "gnvctl"

Example = tuple[str, str]


def format_examples(examples: Sequence[Example]) -> str:
    """Render examples as aligned ``gnvctl <args>  # note`` lines."""
    lines = [f"{PROG} {args}" for args, _ in examples]
    width = max(len(line) for line in lines)
    return "\n".join(
        f"  {line.ljust(width)}  # {note}" if note else f"  {line}"
        for line, (_, note) in zip(lines, examples, strict=True)
    )


class GnvCommand(click.Command):
    """Click Command that adds ``--examples`` when given an ``examples`` list."""

    def __init__(self, *args: Any, examples: Sequence[Example] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{PROG} {self.name}':\n")
        click.echo(format_examples(self.examples))
        ctx.exit(0)


class GnvGroup(click.Group):
    """Root group; subcommands default to :class:`GnvCommand`."""

    command_class = GnvCommand
