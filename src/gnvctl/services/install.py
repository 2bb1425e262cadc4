"""InstallService: realize the manifest's local and peer collections with npm.

Pipeline: SELF_LINK -> LOCAL_INSTALL (dev mode only) -> GLOBAL_INSTALL_AND_LINK

INVARIANT: SELF_LINK always runs first. Running ``npm link`` in the project
after dependencies were installed with ``--no-save`` prunes them again, so
the self-link must precede every install and link of dependencies.
The order lives in :func:`plan_steps` and nowhere else.

Each step re-reads the manifest. A failed step stops the run with no retry
and no rollback; completed steps stay completed and re-running ``install``
is safe because every step is idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from gnvctl.domain.descriptors import package_strings
from gnvctl.domain.errors import InstallStepFailed, ManifestReadError, NpmCommandError
from gnvctl.domain.types import InstallStep, StepStatus
from gnvctl.services.base import BaseService
from gnvctl.services.result import ServiceResult
from gnvctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_RELEASE_STEPS: tuple[InstallStep, ...] = (
    InstallStep.SELF_LINK,
    InstallStep.GLOBAL_INSTALL_AND_LINK,
)
_DEV_STEPS: tuple[InstallStep, ...] = (
    InstallStep.SELF_LINK,
    InstallStep.LOCAL_INSTALL,
    InstallStep.GLOBAL_INSTALL_AND_LINK,
)


def plan_steps(*, install_local_also: bool) -> tuple[InstallStep, ...]:
    """The ordered steps for one install run."""
    return _DEV_STEPS if install_local_also else _RELEASE_STEPS


@dataclass
class StepReport:
    """What one step did."""

    step: InstallStep
    status: StepStatus
    packages: list[str] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step.value,
            "status": self.status.value,
            "packages": self.packages,
            "message": self.message,
        }


class InstallService(BaseService):
    """Runs the install protocol against the project's manifest."""

    @traced
    def install(self, *, install_local_also: bool = False) -> ServiceResult:
        """Link this package, then install local (dev only) and peer dependencies.

        Args:
            install_local_also: Dev mode. Also install the local collection
                into ``node_modules/``. Release mode installs peers only.
        """
        op = "install"
        mode = "dev" if install_local_also else "release"
        warnings: list[str] = []
        reports: list[StepReport] = []

        handlers: dict[InstallStep, Callable[[], StepReport]] = {
            InstallStep.SELF_LINK: self._self_link,
            InstallStep.LOCAL_INSTALL: self._local_install,
            InstallStep.GLOBAL_INSTALL_AND_LINK: self._global_install_and_link,
        }

        if not install_local_also:
            logger.info("Release mode: installing peer dependencies only")

        try:
            for step in plan_steps(install_local_also=install_local_also):
                with trace_span(step.value) as span:
                    report = handlers[step]()
                    if span is not None:
                        span.note("status", report.status.value)
                        span.note("packages", len(report.packages))
                reports.append(report)
            project_name = self._project.load_manifest().name
        except InstallStepFailed as exc:
            exc.completed = [r.step for r in reports]
            logger.info("%s", exc)
            return self._failure(
                op,
                exc,
                detail={
                    "step": exc.step.value,
                    **exc.exit_info.to_dict(),
                    "packages": exc.packages,
                    "completed_steps": [s.value for s in exc.completed],
                },
                data={"mode": mode, "steps": [r.to_dict() for r in reports]},
            )
        except ManifestReadError as exc:
            return self._failure(
                op,
                exc,
                detail={"path": str(exc.path)},
                data={"mode": mode, "steps": [r.to_dict() for r in reports]},
            )

        steps = [r.to_dict() for r in reports]
        self._dispatch_event("post_install", {"mode": mode, "steps": steps}, warnings)

        data: dict[str, Any] = {"mode": mode, "steps": steps}
        linked = next(
            (r for r in reports if r.step is InstallStep.GLOBAL_INSTALL_AND_LINK), None
        )
        if linked is not None and linked.status is StepStatus.DONE and project_name:
            data["message"] = (
                f"Done! Your development CLI should be ready at `{project_name}-dev`."
            )

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _self_link(self) -> StepReport:
        logger.info("Linking this package to global bin")
        self._run(InstallStep.SELF_LINK, [], self._project.npm.link_self)
        return StepReport(
            step=InstallStep.SELF_LINK,
            status=StepStatus.DONE,
            message="Linked this package to the global bin.",
        )

    def _local_install(self) -> StepReport:
        manifest = self._project.load_manifest()
        packages = package_strings(manifest.local)
        key = self._project.store.local_key
        if not packages:
            logger.info("No %s to install", key)
            return StepReport(
                step=InstallStep.LOCAL_INSTALL,
                status=StepStatus.SKIPPED,
                message=f"No {key} to install.",
            )

        logger.info("Adding local deps to node_modules: %s", " ".join(packages))
        self._run(InstallStep.LOCAL_INSTALL, packages, self._project.npm.install, packages)
        return StepReport(
            step=InstallStep.LOCAL_INSTALL,
            status=StepStatus.DONE,
            packages=packages,
            message=f"Installed {len(packages)} packages.",
        )

    def _global_install_and_link(self) -> StepReport:
        manifest = self._project.load_manifest()
        packages = package_strings(manifest.peer)
        key = self._project.store.peer_key
        if not packages:
            logger.info("No %s to install", key)
            return StepReport(
                step=InstallStep.GLOBAL_INSTALL_AND_LINK,
                status=StepStatus.SKIPPED,
                message=f"No {key} to install.",
            )

        # Keys, not descriptors: link whichever version is installed.
        any_version = list(manifest.peer)
        step = InstallStep.GLOBAL_INSTALL_AND_LINK
        logger.info("Adding global peer deps: %s", " ".join(packages))
        self._run(step, packages, self._project.npm.install_global, packages)
        logger.info("Linking peer dependencies locally")
        self._run(step, any_version, self._project.npm.link_many, any_version)
        return StepReport(
            step=step,
            status=StepStatus.DONE,
            packages=packages,
            message=f"Installed and linked {len(packages)} packages.",
        )

    @staticmethod
    def _run(
        step: InstallStep,
        packages: Sequence[str],
        action: Callable[..., None],
        *args: Any,
    ) -> None:
        try:
            action(*args)
        except NpmCommandError as exc:
            raise InstallStepFailed(
                step=step,
                exit_info=exc.exit_info,
                packages=list(packages),
            ) from exc
