"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gnvctl.toml only contains overrides.
Most projects need no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- gnvctl.toml sections ---


class ManifestConfig(BaseModel):
    """[manifest] section."""

    model_config = {"frozen": True}

    filename: str = "package.json"
    local_key: str = "gnvDependencies"
    peer_key: str = "peerDependencies"
    indent: int = 2


class NpmConfig(BaseModel):
    """[npm] section."""

    model_config = {"frozen": True}

    executable: str = "npm"
    silent: bool = True
    force: bool = True
    timeout: float | None = None


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True

