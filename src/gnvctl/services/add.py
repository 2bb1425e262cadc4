"""AddService: record descriptors in a manifest collection, then install.

Pipeline: PARSE (all) -> RECORD + WRITE (per descriptor) -> HOOK -> INSTALL

Every descriptor is parsed before anything is written, so one malformed
descriptor fails the whole call with the manifest untouched. Recording
writes the manifest after each descriptor rather than once per batch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from gnvctl.domain.descriptors import DependencyDescriptor, decode
from gnvctl.domain.errors import MalformedDescriptor, ManifestReadError, WriteError
from gnvctl.domain.types import Collection
from gnvctl.services.base import BaseService
from gnvctl.services.install import InstallService
from gnvctl.services.result import ServiceError, ServiceResult
from gnvctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class AddService(BaseService):
    """Classifies dependencies as local or peer."""

    @traced
    def add(
        self,
        descriptors: Sequence[str],
        *,
        collection: Collection = Collection.LOCAL,
    ) -> ServiceResult:
        """Record *descriptors* under *collection* and run the install protocol.

        Install always runs in dev mode afterwards: registering a dependency
        means the caller wants it available now.

        The same key may sit in both collections; that is reported as a
        warning, not rejected.
        """
        op = "add"
        warnings: list[str] = []

        if not descriptors:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="NO_DESCRIPTORS", message="No descriptors given"),
            )

        try:
            parsed: list[DependencyDescriptor] = [decode(d) for d in descriptors]
        except MalformedDescriptor as exc:
            return self._failure(op, exc, detail={"descriptor": exc.descriptor})

        added: list[dict[str, Any]] = []
        with trace_span("record") as span:
            try:
                recorded = self._record(parsed, collection, added, warnings)
            except (ManifestReadError, WriteError) as exc:
                return self._failure(
                    op,
                    exc,
                    detail={"path": str(exc.path)},
                    data={"collection": collection.value, "added": added},
                    warnings=warnings,
                )
            if span is not None:
                span.note("recorded", len(added))

        if recorded:
            self._dispatch_event(
                "post_add",
                {
                    "collection": collection.value,
                    "added": [{"key": a["key"], "version": a["version"]} for a in added],
                },
                warnings,
            )
            logger.info("Added %s to %s", " ".join(descriptors), self._project.manifest_path.name)

        install = InstallService(self._project).install(install_local_also=True)
        warnings.extend(install.warnings)

        data: dict[str, Any] = {
            "collection": collection.value,
            "added": added,
            "recorded": recorded,
            "install": install.data,
        }
        if recorded:
            data["message"] = (
                f"Added {', '.join(descriptors)} to {self._project.manifest_path.name}."
            )

        if not install.ok:
            return ServiceResult(
                ok=False, op=op, data=data, warnings=warnings, error=install.error
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def _record(
        self,
        parsed: list[DependencyDescriptor],
        collection: Collection,
        added: list[dict[str, Any]],
        warnings: list[str],
    ) -> bool:
        """Apply each descriptor and write back after each one.

        Returns False when there is no manifest to record into.
        """
        manifest = self._project.load_manifest()
        if not manifest.exists:
            warnings.append(
                f"No {self._project.manifest_path.name} in {self._project.root}; "
                "nothing recorded"
            )
            return False

        other = collection.other
        for dep in parsed:
            previous = manifest.set_dependency(collection, dep.key, dep.version)
            self._project.save_manifest(manifest)
            added.append(
                {
                    "key": dep.key,
                    "version": dep.version,
                    "descriptor": str(dep),
                    "previous": previous,
                }
            )
            if dep.key in manifest.collection(other):
                warnings.append(f"{dep.key} is also recorded as a {other.value} dependency")
        return True
