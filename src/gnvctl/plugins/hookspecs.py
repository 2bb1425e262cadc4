"""Pluggy hook specifications for gnvctl lifecycle events.

Hooks run synchronously after the manifest has been written, so a plugin
always sees the persisted state.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("gnvctl")


class GnvctlHookSpec:
    """Hook specifications for the gnvctl plugin system."""

    @hookspec
    def post_add(self, collection: str, added: list[dict[str, str]]) -> None:
        """Called after descriptors are recorded, before install runs."""

    @hookspec
    def post_remove(self, collection: str, removed: list[str]) -> None:
        """Called after keys are removed from a collection."""

    @hookspec
    def post_install(self, mode: str, steps: list[dict[str, Any]]) -> None:
        """Called after every install step has succeeded."""
