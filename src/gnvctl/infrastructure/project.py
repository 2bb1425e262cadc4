"""Project: the single dependency injected into every service.

A Project bundles what one gnvctl invocation needs to touch: the manifest
location, the store that reads and writes it, the npm boundary, and the
plugin manager. It deliberately holds no manifest state; services call
:meth:`Project.load_manifest` at the start of each operation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gnvctl.infrastructure.manifest import Manifest, ManifestStore
from gnvctl.infrastructure.npm import Installer, NpmClient

if TYPE_CHECKING:
    from pathlib import Path

    from gnvctl.config.settings import GnvSettings
    from gnvctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Project:
    """A directory with a manifest, plus the collaborators that act on it.

    Parameters:
        settings: Resolved settings; ``project_root`` picks the directory.
        npm: Installer override (tests pass a recording fake).
        plugin_manager: Plugin manager override. When omitted, one is
            created and loaded lazily if plugins are enabled.
    """

    def __init__(
        self,
        settings: GnvSettings,
        *,
        npm: Installer | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._npm = npm
        self._plugin_manager = plugin_manager
        self.store = ManifestStore(settings.manifest)

    @property
    def settings(self) -> GnvSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._settings.project_root

    @property
    def manifest_path(self) -> Path:
        return self._settings.manifest_path

    @property
    def npm(self) -> Installer:
        """The npm boundary (created lazily on first access)."""
        if self._npm is None:
            self._npm = NpmClient(self._settings.npm, cwd=self.root)
        return self._npm

    @property
    def plugin_manager(self) -> PluginManager | None:
        """Loaded plugin manager, or None when plugins are disabled."""
        if self._plugin_manager is None and self._settings.plugins.enabled:
            from gnvctl.plugins.manager import PluginManager

            pm = PluginManager()
            names = pm.discover_and_load()
            logger.debug("Loaded plugins: %s", names)
            self._plugin_manager = pm
        return self._plugin_manager

    def load_manifest(self) -> Manifest:
        """Read a fresh copy of the manifest."""
        return self.store.read(self.manifest_path)

    def save_manifest(self, manifest: Manifest) -> bool:
        """Write *manifest* back. False when there is no manifest to overwrite."""
        return self.store.write(manifest, self.manifest_path, indent=self._settings.manifest.indent)
