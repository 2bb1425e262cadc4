"""Per-invocation state handed to every command through ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gnvctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gnvctl.config.settings import GnvSettings
    from gnvctl.infrastructure.project import Project
    from gnvctl.services.result import ServiceResult


class AppContext:
    """Settings, the lazily opened project, and result output.

    Building one configures logging (and step timing under ``-v``) but
    reads nothing from disk; ``package.json`` and plugins are only touched
    when a command first asks for :attr:`project`.
    """

    def __init__(self, settings: GnvSettings) -> None:
        from gnvctl.config.logging import configure_logging
        from gnvctl.services.telemetry import enable_telemetry

        self.settings = settings
        self._project: Project | None = None
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )
        if settings.verbose:
            enable_telemetry()

    @property
    def project(self) -> Project:
        if self._project is None:
            from gnvctl.infrastructure.project import Project

            self._project = Project(self.settings)
        return self._project

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result goes to stderr and exits 1.

        Text-mode warnings are echoed to stderr after a successful result so
        stdout stays clean for pipes. JSON output already carries them.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if self.output.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
