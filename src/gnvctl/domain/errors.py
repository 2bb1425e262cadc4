"""Exception taxonomy for gnvctl.

Services catch these at their boundary and convert them into a failed
:class:`~gnvctl.services.result.ServiceResult`. Nothing above the service
layer should ever see a raw ``GnvError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gnvctl.domain.types import InstallStep


@dataclass(frozen=True)
class ExitInfo:
    """What the npm subprocess reported when it failed.

    ``returncode`` is None when the process never produced one (executable
    missing, or killed on timeout).
    """

    command: tuple[str, ...]
    returncode: int | None
    stderr: str = ""
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": " ".join(self.command),
            "returncode": self.returncode,
            "stderr": self.stderr,
            "reason": self.reason,
        }


class GnvError(Exception):
    """Base class for all gnvctl errors."""

    code = "GNV_ERROR"


class MalformedDescriptor(GnvError, ValueError):
    """A dependency descriptor that does not yield a package name."""

    code = "MALFORMED_DESCRIPTOR"

    def __init__(self, descriptor: str) -> None:
        super().__init__(f"Malformed dependency descriptor: {descriptor!r}")
        self.descriptor = descriptor


class ManifestReadError(GnvError):
    """The manifest exists but is not a usable JSON object."""

    code = "MANIFEST_READ_ERROR"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class WriteError(GnvError):
    """The manifest could not be written back."""

    code = "WRITE_ERROR"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot write manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class NpmCommandError(GnvError):
    """A single npm invocation failed."""

    code = "NPM_COMMAND_FAILED"

    def __init__(self, exit_info: ExitInfo) -> None:
        rc = exit_info.returncode
        status = f"exit code {rc}" if rc is not None else exit_info.reason or "no exit code"
        super().__init__(f"`{' '.join(exit_info.command)}` failed ({status})")
        self.exit_info = exit_info


@dataclass(eq=False)
class InstallStepFailed(GnvError):
    """An install step failed. Earlier steps stay completed (no rollback)."""

    step: InstallStep
    exit_info: ExitInfo
    packages: list[str] = field(default_factory=list)
    completed: list[InstallStep] = field(default_factory=list)

    code = "INSTALL_STEP_FAILED"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def __str__(self) -> str:
        rc = self.exit_info.returncode
        status = f"exit code {rc}" if rc is not None else self.exit_info.reason or "no exit code"
        return f"Install step {self.step.value} failed ({status})"
