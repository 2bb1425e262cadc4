"""RemoveService: drop package keys from a manifest collection.

Removal is idempotent: a key that is not present is reported under
``missing`` and is not an error. Nothing is uninstalled.
"""

from __future__ import annotations

from collections.abc import Sequence

from gnvctl.domain.descriptors import decode
from gnvctl.domain.errors import MalformedDescriptor, ManifestReadError, WriteError
from gnvctl.domain.types import Collection
from gnvctl.services.base import BaseService
from gnvctl.services.result import ServiceResult
from gnvctl.services.telemetry import traced


class RemoveService(BaseService):
    """Removes dependencies from the local or peer collection."""

    @traced
    def remove(
        self,
        descriptors: Sequence[str],
        *,
        collection: Collection = Collection.LOCAL,
    ) -> ServiceResult:
        """Delete each descriptor's key from *collection*.

        Versions in the descriptors are ignored: ``foo@1.0.0`` removes ``foo``
        whatever version is recorded. The manifest is written after each
        key actually removed.
        """
        op = "remove"
        warnings: list[str] = []

        try:
            keys = [decode(d).key for d in descriptors]
        except MalformedDescriptor as exc:
            return self._failure(op, exc, detail={"descriptor": exc.descriptor})

        removed: list[str] = []
        missing: list[str] = []
        try:
            manifest = self._project.load_manifest()
            for key in keys:
                if manifest.discard_dependency(collection, key):
                    self._project.save_manifest(manifest)
                    removed.append(key)
                else:
                    missing.append(key)
        except (ManifestReadError, WriteError) as exc:
            return self._failure(
                op,
                exc,
                detail={"path": str(exc.path)},
                data={"collection": collection.value, "removed": removed},
            )

        if removed:
            self._dispatch_event(
                "post_remove",
                {"collection": collection.value, "removed": removed},
                warnings,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"collection": collection.value, "removed": removed, "missing": missing},
            warnings=warnings,
        )
