"""Tests for BaseService: hook dispatch and failure conversion."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pluggy

from gnvctl.config.settings import GnvSettings
from gnvctl.domain.errors import ManifestReadError
from gnvctl.infrastructure.project import Project
from gnvctl.plugins.manager import PluginManager
from gnvctl.services.add import AddService
from gnvctl.services.base import BaseService
from gnvctl.services.install import InstallService
from gnvctl.services.listing import ListService
from gnvctl.services.remove import RemoveService

hookimpl = pluggy.HookimplMarker("gnvctl")


class _ExplodingPlugin:
    @hookimpl
    def post_install(self, mode: str, steps: list[dict[str, Any]]) -> None:
        raise RuntimeError("plugin bug")


class TestBaseService:
    def test_project_stored(self, project: Project) -> None:
        assert BaseService(project)._project is project

    def test_all_services_inherit(self) -> None:
        for cls in (AddService, RemoveService, InstallService, ListService):
            assert issubclass(cls, BaseService)

    def test_dispatch_noop_without_plugins(self, project: Project) -> None:
        warnings: list[str] = []
        BaseService(project)._dispatch_event("post_install", {"mode": "dev", "steps": []}, warnings)
        assert warnings == []

    def test_plugin_failure_becomes_warning(self, project_root: Path) -> None:
        pm = PluginManager()
        pm.register_plugin(_ExplodingPlugin(), name="exploding")
        settings = GnvSettings.from_cli(project_root=project_root)
        project = Project(settings, plugin_manager=pm)

        warnings: list[str] = []
        BaseService(project)._dispatch_event(
            "post_install", {"mode": "dev", "steps": []}, warnings
        )
        assert warnings == ["Plugin hook post_install failed"]

    def test_failure_converts_exception(self) -> None:
        exc = ManifestReadError(Path("package.json"), "invalid JSON")
        result = BaseService._failure("list", exc, detail={"path": "package.json"})
        assert result.ok is False
        assert result.op == "list"
        assert result.error is not None
        assert result.error.code == "MANIFEST_READ_ERROR"
        assert result.error.detail == {"path": "package.json"}
        assert "invalid JSON" in result.error.message
