"""Tests for the gnvctl exception taxonomy."""

from __future__ import annotations

from pathlib import Path

from gnvctl.domain.errors import (
    ExitInfo,
    InstallStepFailed,
    ManifestReadError,
    NpmCommandError,
    WriteError,
)
from gnvctl.domain.types import InstallStep


class TestExitInfo:
    def test_to_dict_joins_command(self) -> None:
        info = ExitInfo(command=("npm", "i", "-g", "foo@1"), returncode=1, stderr="boom")
        assert info.to_dict() == {
            "command": "npm i -g foo@1",
            "returncode": 1,
            "stderr": "boom",
            "reason": "",
        }


class TestErrors:
    def test_codes(self) -> None:
        path = Path("package.json")
        assert ManifestReadError(path, "x").code == "MANIFEST_READ_ERROR"
        assert WriteError(path, "x").code == "WRITE_ERROR"

    def test_manifest_read_error_message(self) -> None:
        exc = ManifestReadError(Path("/p/package.json"), "invalid JSON")
        assert "/p/package.json" in str(exc)
        assert exc.reason == "invalid JSON"

    def test_npm_command_error_message(self) -> None:
        exc = NpmCommandError(ExitInfo(command=("npm", "link"), returncode=243))
        assert str(exc) == "`npm link` failed (exit code 243)"

    def test_npm_command_error_without_returncode(self) -> None:
        exc = NpmCommandError(
            ExitInfo(command=("npm", "link"), returncode=None, reason="No such file")
        )
        assert "No such file" in str(exc)


class TestInstallStepFailed:
    def test_message_and_fields(self) -> None:
        exc = InstallStepFailed(
            step=InstallStep.LOCAL_INSTALL,
            exit_info=ExitInfo(command=("npm", "i"), returncode=1),
            packages=["foo@1"],
        )
        assert exc.code == "INSTALL_STEP_FAILED"
        assert str(exc) == "Install step local_install failed (exit code 1)"
        assert exc.packages == ["foo@1"]
        assert exc.completed == []

    def test_timeout_reason(self) -> None:
        exc = InstallStepFailed(
            step=InstallStep.SELF_LINK,
            exit_info=ExitInfo(command=("npm",), returncode=None, reason="timed out after 5s"),
        )
        assert "timed out after 5s" in str(exc)

    def test_hashable(self) -> None:
        exc = InstallStepFailed(
            step=InstallStep.SELF_LINK,
            exit_info=ExitInfo(command=("npm",), returncode=1),
        )
        assert exc in {exc}
