"""BaseService: shared foundation for gnvctl services.

Every service receives a :class:`Project` at construction time and loads
the manifest itself at the start of each operation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gnvctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from gnvctl.domain.errors import GnvError
    from gnvctl.infrastructure.project import Project

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class AddService(BaseService):
            def add(self, descriptors: list[str]) -> ServiceResult:
                manifest = self._project.load_manifest()
                ...
    """

    def __init__(self, project: Project) -> None:
        self._project = project

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle hook. No-op when plugins are disabled.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            pm = self._project.plugin_manager
            if pm is None:
                return
            pm.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Hook dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    @staticmethod
    def _failure(
        op: str,
        exc: GnvError,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Convert a gnvctl exception into a failed ServiceResult."""
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=exc.code, message=str(exc), detail=detail or {}),
        )
