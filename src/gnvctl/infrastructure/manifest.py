"""Manifest (``package.json``) persistence.

INVARIANT: every operation loads a fresh :class:`Manifest`, mutates it in
memory, and writes it back in full. There is no cached copy and no patching.

The manifest format is shared with npm, so every top-level key gnvctl does
not own is carried through untouched, in its original order.

There is no file locking. Two processes doing read-modify-write on the same
manifest at once will lose updates (last write wins). gnvctl assumes one
orchestrating process per project directory.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from gnvctl.config.models import ManifestConfig
from gnvctl.domain.errors import ManifestReadError, WriteError
from gnvctl.domain.types import Collection

logger = logging.getLogger(__name__)


class Manifest(BaseModel):
    """In-memory manifest: the two owned collections plus a pass-through bag.

    Attributes:
        local: Package key to version, stored under the local key on disk.
        peer: Package key to version, stored under the peer key on disk.
        extra: Every other top-level key, verbatim.
        key_order: Top-level key order as read, used to write back in place.
        exists: False when the file was absent at read time.
        null_collections: Owned keys stored as ``null`` on disk. They stay
            ``null`` on write while their collection remains empty.
    """

    local: dict[str, str] = Field(default_factory=dict)
    peer: dict[str, str] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)
    key_order: list[str] = Field(default_factory=list)
    exists: bool = False
    null_collections: set[Collection] = Field(default_factory=set)

    @property
    def name(self) -> str:
        value = self.extra.get("name")
        return value if isinstance(value, str) else ""

    def collection(self, which: Collection) -> dict[str, str]:
        return self.local if which is Collection.LOCAL else self.peer

    def set_dependency(self, which: Collection, key: str, version: str) -> str | None:
        """Record *key* at *version*. Returns the previous version, if any."""
        target = self.collection(which)
        previous = target.get(key)
        target[key] = version
        return previous

    def discard_dependency(self, which: Collection, key: str) -> bool:
        """Drop *key* from a collection. Returns False if it was not there."""
        return self.collection(which).pop(key, None) is not None


class ManifestStore:
    """Reads and writes manifests using the configured key names."""

    def __init__(self, config: ManifestConfig | None = None) -> None:
        self._config = config or ManifestConfig()

    @property
    def local_key(self) -> str:
        return self._config.local_key

    @property
    def peer_key(self) -> str:
        return self._config.peer_key

    def _owned_keys(self) -> dict[Collection, str]:
        return {Collection.LOCAL: self.local_key, Collection.PEER: self.peer_key}

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(self, location: Path) -> Manifest:
        """Load the manifest at *location*.

        A missing file is the valid "nothing configured yet" state and yields
        an empty manifest. A present file that cannot be used raises
        :class:`ManifestReadError`.
        """
        if not location.exists():
            logger.debug("No manifest at %s", location)
            return Manifest(exists=False)

        try:
            raw = location.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestReadError(location, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ManifestReadError(location, f"not valid UTF-8 ({exc.reason})") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestReadError(location, f"invalid JSON ({exc})") from exc

        if not isinstance(data, dict):
            raise ManifestReadError(location, "top-level value is not an object")

        keys = self._owned_keys()
        owned = set(keys.values())
        nulls = {which for which, key in keys.items() if key in data and data[key] is None}
        return Manifest(
            local=self._read_collection(data, self.local_key, location),
            peer=self._read_collection(data, self.peer_key, location),
            extra={k: v for k, v in data.items() if k not in owned},
            key_order=list(data),
            exists=True,
            null_collections=nulls,
        )

    @staticmethod
    def _read_collection(data: dict[str, Any], key: str, location: Path) -> dict[str, str]:
        value = data.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ManifestReadError(location, f"{key!r} is not an object")
        for name, version in value.items():
            if not isinstance(version, str):
                raise ManifestReadError(location, f"{key}.{name} is not a version string")
        return dict(value)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def to_data(self, manifest: Manifest) -> dict[str, Any]:
        """Rebuild the JSON object in its original key order.

        An owned key that was absent on read is only added (at the end) when
        its collection is non-empty. One read as ``null`` stays ``null``
        while its collection is empty.
        """
        owned: dict[str, Any] = {}
        for which, key in self._owned_keys().items():
            deps = manifest.collection(which)
            if not deps and which in manifest.null_collections:
                owned[key] = None
            else:
                owned[key] = dict(deps)

        out: dict[str, Any] = {}
        for key in manifest.key_order:
            if key in owned:
                out[key] = owned[key]
            elif key in manifest.extra:
                out[key] = manifest.extra[key]
        for key, value in manifest.extra.items():
            out.setdefault(key, value)
        for key, value in owned.items():
            if key not in out and value:
                out[key] = value
        return out

    def write(self, manifest: Manifest, location: Path, *, indent: int | None = None) -> bool:
        """Replace *location* with *manifest*.

        Never creates a manifest: returns False and writes nothing when the
        file does not exist. The new content goes to a sibling temp file that
        is renamed over *location*, so an interrupted write leaves the old
        file intact. Raises :class:`WriteError` if either step fails.
        """
        if not location.exists():
            logger.warning("Not a package: %s does not exist, nothing written", location)
            return False

        spaces = self._config.indent if indent is None else indent
        payload = json.dumps(self.to_data(manifest), indent=spaces, ensure_ascii=False)
        tmp = location.with_name(f"{location.name}.tmp.{os.getpid()}")
        try:
            tmp.write_text(payload + "\n", encoding="utf-8")
            shutil.copymode(location, tmp)
            os.replace(tmp, location)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise WriteError(location, exc.strerror or str(exc)) from exc

        logger.debug("Wrote manifest %s", location)
        return True
