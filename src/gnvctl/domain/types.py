"""Dependency collections and install steps."""

from __future__ import annotations

from enum import StrEnum


class Collection(StrEnum):
    """The two manifest collections managed by gnvctl."""

    LOCAL = "local"
    PEER = "peer"

    @property
    def other(self) -> Collection:
        return Collection.PEER if self is Collection.LOCAL else Collection.LOCAL


class InstallStep(StrEnum):
    """Steps of an install run, in the only order they may execute."""

    SELF_LINK = "self_link"
    LOCAL_INSTALL = "local_install"
    GLOBAL_INSTALL_AND_LINK = "global_install_and_link"


class StepStatus(StrEnum):
    """Outcome of a single install step."""

    DONE = "done"
    SKIPPED = "skipped"
