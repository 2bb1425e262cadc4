"""Shared pytest fixtures and test helpers for gnvctl tests."""

from __future__ import annotations

import json
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from gnvctl.config.settings import GnvSettings
from gnvctl.domain.errors import ExitInfo, NpmCommandError
from gnvctl.infrastructure.project import Project
from gnvctl.services.telemetry import _active, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` enables telemetry process-wide; keep it from leaking across tests."""
    yield
    disable_telemetry()
    _active.set(None)


class FakeNpm:
    """Records installer calls instead of running npm.

    ``fail_on`` names an operation (``"link_self"``, ``"install"``,
    ``"install_global"``, ``"link_many"``) that raises NpmCommandError.
    """

    def __init__(self, fail_on: str | None = None, returncode: int = 1) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.fail_on = fail_on
        self.returncode = returncode

    def _record(self, op: str, args: Sequence[str]) -> None:
        self.calls.append((op, list(args)))
        if op == self.fail_on:
            raise NpmCommandError(
                ExitInfo(
                    command=("npm", op, *args),
                    returncode=self.returncode,
                    stderr="npm ERR! code E404",
                )
            )

    def link_self(self, extra_args: Sequence[str] = ()) -> None:
        self._record("link_self", [])

    def install(self, package_strings: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        self._record("install", package_strings)

    def install_global(
        self, package_strings: Sequence[str], extra_args: Sequence[str] = ()
    ) -> None:
        self._record("install_global", package_strings)

    def link_many(self, package_keys: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        self._record("link_many", package_keys)

    @property
    def ops(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def fake_npm() -> FakeNpm:
    return FakeNpm()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary package directory with a minimal package.json.

    This is the single source of truth for the package layout.
    """
    write_manifest(tmp_path, {"name": "my-tool", "version": "1.0.0"})
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> GnvSettings:
    return GnvSettings.from_cli(project_root=project_root, plugins={"enabled": False})


@pytest.fixture
def project(settings: GnvSettings, fake_npm: FakeNpm) -> Project:
    """Project on a temp package with npm faked and plugins disabled."""
    return Project(settings, npm=fake_npm)


@pytest.fixture
def _isolated_project(
    project_root: Path, fake_npm: FakeNpm, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Run the CLI inside a temp package with npm faked out.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes. The ``fake_npm`` fixture is the same instance the CLI uses.
    """
    monkeypatch.chdir(project_root)
    monkeypatch.delenv("GNVCTL_CONFIG", raising=False)
    monkeypatch.setenv("GNVCTL_PLUGINS__ENABLED", "false")
    monkeypatch.setattr(
        "gnvctl.infrastructure.project.NpmClient", lambda *args, **kwargs: fake_npm
    )


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_manifest(root: Path, data: dict[str, Any], filename: str = "package.json") -> Path:
    path = root / filename
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def read_manifest(root: Path, filename: str = "package.json") -> dict[str, Any]:
    return json.loads((root / filename).read_text(encoding="utf-8"))
