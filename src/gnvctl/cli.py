"""Root CLI group for gnvctl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from gnvctl import __version__
from gnvctl.commands import register_commands
from gnvctl.commands._base import GnvGroup
from gnvctl.commands._context import AppContext
from gnvctl.config.settings import GnvSettings


@click.group(cls=GnvGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="gnvctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-C",
    "--directory",
    "project_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory holding package.json (default: CWD).",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    project_root: Path | None,
    config_path: str | None,
) -> None:
    """gnvctl: manage local and peer dependencies on top of npm."""
    settings = GnvSettings.from_cli(
        config_path=config_path,
        project_root=project_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
