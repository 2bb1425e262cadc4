"""ListService: show what the manifest records in each collection."""

from __future__ import annotations

from gnvctl.domain.descriptors import package_strings
from gnvctl.domain.errors import ManifestReadError
from gnvctl.services.base import BaseService
from gnvctl.services.result import ServiceResult
from gnvctl.services.telemetry import traced


class ListService(BaseService):
    @traced
    def list_dependencies(self) -> ServiceResult:
        op = "list"
        path = self._project.manifest_path
        try:
            manifest = self._project.load_manifest()
        except ManifestReadError as exc:
            return self._failure(op, exc, detail={"path": str(path)})

        warnings: list[str] = []
        if not manifest.exists:
            warnings.append(f"No {path.name} in {self._project.root}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "manifest": str(path),
                "exists": manifest.exists,
                "local": dict(manifest.local),
                "peer": dict(manifest.peer),
                "local_packages": package_strings(manifest.local),
                "peer_packages": package_strings(manifest.peer),
            },
            warnings=warnings,
        )
