"""npm subprocess boundary.

gnvctl never installs anything itself. Every install or link is one
blocking ``npm`` invocation run in the project root. A nonzero exit, a
missing executable, or a timeout raises :class:`NpmCommandError` carrying
the command line, the exit code, and the tail of stderr.

Every invocation passes ``--no-save`` so npm never rewrites the manifest
behind gnvctl's back.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from gnvctl.config.models import NpmConfig
from gnvctl.domain.errors import ExitInfo, NpmCommandError

logger = logging.getLogger(__name__)

# Enough stderr to see npm's "ERR!" block without dumping a whole log.
_STDERR_TAIL_LINES = 20


@runtime_checkable
class Installer(Protocol):
    """The four operations the install protocol needs from a package manager."""

    def link_self(self, extra_args: Sequence[str] = ()) -> None: ...

    def install(self, package_strings: Sequence[str], extra_args: Sequence[str] = ()) -> None: ...

    def install_global(
        self, package_strings: Sequence[str], extra_args: Sequence[str] = ()
    ) -> None: ...

    def link_many(self, package_keys: Sequence[str], extra_args: Sequence[str] = ()) -> None: ...


def _tail(text: str | bytes | None) -> str:
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return "\n".join(text.strip().splitlines()[-_STDERR_TAIL_LINES:])


class NpmClient:
    """Runs npm with the flags gnvctl relies on."""

    def __init__(self, config: NpmConfig | None = None, cwd: Path | None = None) -> None:
        self._config = config or NpmConfig()
        self._cwd = cwd

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def link_self(self, extra_args: Sequence[str] = ()) -> None:
        """Link the package in ``cwd`` into the global bin, replacing stale links."""
        self._run_npm("link", *self._link_flags(), *extra_args)

    def install(self, package_strings: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        """Install into the project's ``node_modules/`` without saving."""
        self._run_npm("i", *self._link_flags(), *extra_args, *package_strings)

    def install_global(
        self, package_strings: Sequence[str], extra_args: Sequence[str] = ()
    ) -> None:
        """Install into the global prefix without saving."""
        self._run_npm("i", "-g", *self._quiet_flags(), *extra_args, *package_strings)

    def link_many(self, package_keys: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        """Link globally installed packages into the project by key."""
        self._run_npm("link", *self._link_flags(), *extra_args, *package_keys)

    # ------------------------------------------------------------------
    # Subprocess helpers
    # ------------------------------------------------------------------

    def _quiet_flags(self) -> list[str]:
        flags = ["--no-save"]
        if self._config.silent:
            flags.append("--silent")
        return flags

    def _link_flags(self) -> list[str]:
        flags = self._quiet_flags()
        if self._config.force:
            flags.insert(0, "-f")
        return flags

    def _run_npm(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run npm in the project root. Raises NpmCommandError on any failure."""
        command = (self._config.executable, *args)
        logger.info("> %s", " ".join(command))
        try:
            result = subprocess.run(
                list(command),
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._config.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise NpmCommandError(
                ExitInfo(
                    command=command,
                    returncode=None,
                    stderr=_tail(exc.stderr),
                    reason=f"timed out after {self._config.timeout}s",
                )
            ) from exc
        except OSError as exc:
            raise NpmCommandError(
                ExitInfo(command=command, returncode=None, reason=exc.strerror or str(exc))
            ) from exc

        if result.stdout:
            logger.debug("npm stdout: %s", _tail(result.stdout))
        if result.returncode != 0:
            raise NpmCommandError(
                ExitInfo(command=command, returncode=result.returncode, stderr=_tail(result.stderr))
            )
        return result
