"""Locate ``gnvctl.toml`` for a project.

A package may carry its own ``gnvctl.toml`` next to ``package.json``, or share
one placed higher up (a monorepo root, a home directory). The nearest file
wins. ``GNVCTL_CONFIG`` names a file explicitly and disables the search.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "gnvctl.toml"
CONFIG_ENV_VAR = "GNVCTL_CONFIG"


def _ancestors(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``gnvctl.toml`` at or above *start* (default: cwd).

    The file's location only supplies settings; it never changes which
    ``package.json`` gnvctl operates on.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
