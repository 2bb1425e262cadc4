"""Rich Console factory and theme for gnvctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GNV_THEME = Theme(
    {
        "gnv.ok": "bold green",
        "gnv.error": "bold red",
        "gnv.warning": "bold yellow",
        "gnv.op": "bold cyan",
        "gnv.key": "dim",
        "gnv.package": "bold blue",
        "gnv.version": "magenta",
        "gnv.path": "dim",
        "gnv.step.done": "green",
        "gnv.step.skipped": "dim",
        "gnv.collection.local": "cyan",
        "gnv.collection.peer": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=GNV_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_collection(collection: str) -> str:
    return f"gnv.collection.{collection}" if collection in ("local", "peer") else ""
